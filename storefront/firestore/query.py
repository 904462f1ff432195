"""
Structured Query Building

Filter, ordering and document types shared by the REST client and any
other store implementation, plus the builder for Firestore's
structuredQuery JSON.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .codec import encode_value

OPERATORS = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    "array-contains": "ARRAY_CONTAINS",
    "in": "IN",
}

_SIMPLE_FIELD_RE = re.compile(r'^[A-Za-z_][A-Za-z_0-9]*$')


@dataclass(frozen=True)
class FieldFilter:
    """Single-field comparison, e.g. FieldFilter("category", "==", "silk")."""
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op}")


@dataclass(frozen=True)
class OrderBy:
    """Sort key for a query."""
    field: str
    descending: bool = False


@dataclass
class Document:
    """A stored document: short id, full resource name and decoded fields."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    name: str = ""
    update_time: Optional[datetime] = None


def quote_field_path(path: str) -> str:
    """Backtick-quote a field name that is not a plain identifier."""
    if _SIMPLE_FIELD_RE.match(path):
        return path
    return "`" + path.replace("\\", "\\\\").replace("`", "\\`") + "`"


def _filter_json(flt: FieldFilter) -> Dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": quote_field_path(flt.field)},
            "op": OPERATORS[flt.op],
            "value": encode_value(flt.value),
        }
    }


def _order_json(field_path: str, descending: bool) -> Dict[str, Any]:
    return {
        "field": {"fieldPath": field_path},
        "direction": "DESCENDING" if descending else "ASCENDING",
    }


def build_structured_query(
    collection: str,
    filters: Sequence[FieldFilter] = (),
    order_by: Sequence[OrderBy] = (),
    limit: Optional[int] = None,
    start_after: Optional[List[Dict[str, Any]]] = None,
    select: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """
    Build a structuredQuery body for documents:runQuery.

    Args:
        collection: Collection id
        filters: Conditions combined with AND
        order_by: Sort keys, applied in order
        limit: Maximum number of documents
        start_after: Encoded cursor values, one per sort key followed by
            the referenceValue of the last document seen
        select: Field paths to return (None returns whole documents)

    Returns:
        structuredQuery JSON
    """
    query: Dict[str, Any] = {"from": [{"collectionId": collection}]}

    if select is not None:
        query["select"] = {
            "fields": [{"fieldPath": quote_field_path(p)} for p in select]
        }

    if len(filters) == 1:
        query["where"] = _filter_json(filters[0])
    elif filters:
        query["where"] = {
            "compositeFilter": {
                "op": "AND",
                "filters": [_filter_json(f) for f in filters],
            }
        }

    orders = [_order_json(quote_field_path(o.field), o.descending) for o in order_by]
    if start_after:
        # Cursor ends with the document name, so the name must be a sort key too
        last_descending = order_by[-1].descending if order_by else False
        orders.append(_order_json("__name__", last_descending))
        query["startAt"] = {"values": start_after, "before": False}
    if orders:
        query["orderBy"] = orders

    if limit is not None:
        query["limit"] = limit

    return query
