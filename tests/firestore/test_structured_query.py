"""Tests for storefront/firestore/query.py"""

import pytest

from storefront.firestore.query import (
    FieldFilter,
    OrderBy,
    build_structured_query,
    quote_field_path,
)


class TestFieldFilter:
    def test_unsupported_operator(self):
        with pytest.raises(ValueError, match="Unsupported operator"):
            FieldFilter("price", "~", 1)

    def test_hashable_and_comparable(self):
        assert FieldFilter("category", "==", "silk") == FieldFilter("category", "==", "silk")
        assert OrderBy("price") != OrderBy("price", descending=True)


class TestQuoteFieldPath:
    def test_plain_identifier(self):
        assert quote_field_path("inStock") == "inStock"

    def test_quotes_other_names(self):
        assert quote_field_path("care-notes") == "`care-notes`"
        assert quote_field_path("a`b") == "`a\\`b`"


class TestBuildStructuredQuery:
    def test_collection_only(self):
        assert build_structured_query("products") == {"from": [{"collectionId": "products"}]}

    def test_single_filter(self):
        query = build_structured_query("products", [FieldFilter("inStock", ">", 0)])
        assert query["where"] == {"fieldFilter": {
            "field": {"fieldPath": "inStock"},
            "op": "GREATER_THAN",
            "value": {"integerValue": "0"},
        }}

    def test_multiple_filters_are_anded(self):
        query = build_structured_query("products", [
            FieldFilter("category", "==", "silk"),
            FieldFilter("featured", "==", True),
        ])
        composite = query["where"]["compositeFilter"]
        assert composite["op"] == "AND"
        assert len(composite["filters"]) == 2

    def test_order_and_limit(self):
        query = build_structured_query(
            "products", order_by=[OrderBy("createdAt", descending=True)], limit=20,
        )
        assert query["orderBy"] == [{"field": {"fieldPath": "createdAt"}, "direction": "DESCENDING"}]
        assert query["limit"] == 20
        assert "startAt" not in query

    def test_cursor_adds_name_ordering(self):
        cursor = [{"doubleValue": 100.0}, {"referenceValue": "projects/p/databases/d/documents/products/x"}]
        query = build_structured_query("products", order_by=[OrderBy("price")], start_after=cursor)
        assert query["orderBy"][-1] == {"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"}
        assert query["startAt"] == {"values": cursor, "before": False}

    def test_select(self):
        query = build_structured_query("products", select=["sku"])
        assert query["select"] == {"fields": [{"fieldPath": "sku"}]}
