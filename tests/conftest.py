"""Shared test fixtures."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from storefront.firestore import (
    SERVER_TIMESTAMP,
    Document,
    DocumentNotFoundError,
    FirestoreError,
    IndexUnavailableError,
    WriteBatch,
)
from storefront.ingestion import RecordTransformer

CATEGORY_MAP = {
    "linen": "casual",
    "silk": "silk",
    "cotton": "cotton",
    "chiffon": "party",
    "Silk Sarees": "silk",
}

KNOWN_CATEGORIES = {"silk", "cotton", "designer", "wedding", "casual", "party"}

CARE_INSTRUCTIONS = {
    "silk": "Dry clean only",
    "cotton": "Machine washable",
}


def _type_rank(value):
    """Firestore cross-type ordering: null < bool < number < timestamp < string."""
    if value is None:
        return 0, 0
    if isinstance(value, bool):
        return 1, value
    if isinstance(value, (int, float)):
        return 2, value
    if isinstance(value, datetime):
        return 3, value.timestamp()
    if isinstance(value, str):
        return 4, value
    return 5, str(value)


def _matches(data, flt):
    if flt.field not in data:
        return False
    value = data[flt.field]
    left, right = _type_rank(value), _type_rank(flt.value)
    if flt.op == "==":
        return left == right
    if flt.op == "!=":
        return left != right

    if left[0] != right[0]:
        return False
    if flt.op == ">":
        return left > right
    if flt.op == ">=":
        return left >= right
    if flt.op == "<":
        return left < right
    if flt.op == "<=":
        return left <= right
    raise ValueError(f"Operator not supported by the fake store: {flt.op}")


class FakeDocumentStore:
    """
    In-memory document store with the same interface as FirestoreAPIClient.

    Knobs:
        index_required: queries combining a filter with an ordering raise
            IndexUnavailableError, like a project without composite indexes
        query_errors: exceptions raised by the next run_query calls, in order
        fail_skus: creates carrying one of these SKUs make their commit fail
        fail_commits: 1-based commit numbers that fail
    """

    def __init__(self):
        self.collections = {}
        self.index_required = False
        self.query_errors = []
        self.fail_skus = set()
        self.fail_commits = set()
        self.queries = []
        self.commits = []
        self.commit_calls = 0
        self.clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _now(self):
        self.clock += timedelta(seconds=1)
        return self.clock

    def add(self, collection, data, doc_id):
        """Seed a document directly, bypassing commits."""
        self.collections.setdefault(collection, {})[doc_id] = dict(data)
        return doc_id

    def documents(self, collection):
        return self.collections.get(collection, {})

    # Reads

    def run_query(self, collection, filters=(), order_by=(), limit=None, start_after=None, select=None):
        self.queries.append({
            "collection": collection,
            "filters": list(filters),
            "order_by": list(order_by),
            "limit": limit,
            "start_after": start_after,
        })
        if self.query_errors:
            raise self.query_errors.pop(0)
        if self.index_required and filters and order_by:
            raise IndexUnavailableError(
                "The query requires an index. You can create it here: https://console.firebase.google.com/...",
                400,
                "FAILED_PRECONDITION",
            )

        docs = [
            (doc_id, data) for doc_id, data in self.documents(collection).items()
            if all(_matches(data, f) for f in filters)
        ]

        # Implicit final ordering by document id, in the direction of the last key
        last_descending = order_by[-1].descending if order_by else False
        docs.sort(key=lambda d: d[0], reverse=last_descending)
        for order in reversed(list(order_by)):
            docs.sort(key=lambda d, f=order.field: _type_rank(d[1].get(f)), reverse=order.descending)

        if start_after:
            last_id = start_after[-1]
            ids = [doc_id for doc_id, _ in docs]
            docs = docs[ids.index(last_id) + 1:] if last_id in ids else []

        if limit is not None:
            docs = docs[:limit]

        return [self._document(collection, doc_id, data, select) for doc_id, data in docs]

    @staticmethod
    def _document(collection, doc_id, data, select=None):
        if select is not None:
            data = {k: v for k, v in data.items() if k in select}
        return Document(id=doc_id, data=dict(data), name=f"{collection}/{doc_id}")

    def stream(self, collection, select=None, page_size=None):
        for doc_id in sorted(self.documents(collection)):
            yield self._document(collection, doc_id, self.documents(collection)[doc_id], select)

    def get_document(self, collection, doc_id):
        data = self.documents(collection).get(doc_id)
        if data is None:
            raise DocumentNotFoundError(f"Document not found: {collection}/{doc_id}", 404, "NOT_FOUND")
        return self._document(collection, doc_id, data)

    # Writes

    def commit_writes(self, writes):
        self.commit_calls += 1
        if self.commit_calls in self.fail_commits:
            raise FirestoreError("Commit aborted", 409, "ABORTED")

        for write in writes:
            existing = self.documents(write.collection).get(write.doc_id)
            if write.op == "create":
                if write.data.get("sku") in self.fail_skus:
                    raise FirestoreError("Write rejected", 403, "PERMISSION_DENIED")
                if existing is not None:
                    raise FirestoreError("Document already exists", 409, "ALREADY_EXISTS")
            elif write.op == "update" and existing is None:
                raise DocumentNotFoundError(
                    f"No document to update: {write.collection}/{write.doc_id}", 404, "NOT_FOUND",
                )

        # All preconditions hold: apply every write
        for write in writes:
            docs = self.collections.setdefault(write.collection, {})
            if write.op == "delete":
                docs.pop(write.doc_id, None)
                continue
            data = {
                k: (self._now() if v is SERVER_TIMESTAMP else v)
                for k, v in write.data.items()
            }
            if write.op == "create":
                docs[write.doc_id] = data
            else:
                docs[write.doc_id].update(data)

        self.commits.append(list(writes))

    def batch(self):
        return WriteBatch(self)

    def create_document(self, collection, data, doc_id=""):
        batch = self.batch()
        doc_id = batch.create(collection, data, doc_id)
        batch.commit()
        return doc_id

    def update_document(self, collection, doc_id, data):
        batch = self.batch()
        batch.update(collection, doc_id, data)
        batch.commit()

    def delete_document(self, collection, doc_id):
        batch = self.batch()
        batch.delete(collection, doc_id)
        batch.commit()


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return FakeDocumentStore()


@pytest.fixture
def transformer():
    """Transformer with a fixed vocabulary and seeded SKU suffixes."""
    return RecordTransformer(
        category_map=CATEGORY_MAP,
        known_categories=KNOWN_CATEGORIES,
        care_instructions=CARE_INSTRUCTIONS,
        rng=random.Random(42),
    )


@pytest.fixture
def sample_records():
    """Raw records shaped like a saree.json export."""
    return [
        {
            "name": "Magenta Silk Saree",
            "category": "silk",
            "sku": "SIL-MSS-0001",
            "price": 4999,
            "originalPrice": 7499,
            "color": "Magenta",
            "fabric": "Silk",
            "occasion": "Wedding",
            "reviews": 12,
            "rating": 4.8,
            "inStock": 3,
            "imageUrl": "https://example.com/magenta.jpg",
        },
        {
            "name": "Teal Cotton Printed Saree",
            "category": "cotton",
            "sku": "COT-TCPS-0002",
            "price": 1599,
            "originalPrice": 2299,
            "color": "Teal",
            "fabric": "Cotton",
            "occasion": "Casual Wear",
            "inStock": 0,
            "images": ["https://example.com/teal-1.jpg", "https://example.com/teal-2.jpg"],
        },
        {
            "name": "Sea Green Linen Saree",
            "category": "linen",
            "sku": "CAS-SGLS-0003",
            "price": 2199,
            "fabric": "Linen",
            "featured": True,
            "inStock": 7,
        },
    ]


@pytest.fixture
def seed_products(store, transformer):
    """
    Seed stored products from raw records.

    Returns a function: seed_products(records, collection="products") -> list of ids.
    Documents get ids p01, p02, ... and createdAt one day apart in input order.
    """
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _seed(records, collection="products"):
        ids = []
        start = len(store.documents(collection))
        for i, record in enumerate(records, start=start + 1):
            product = transformer.transform(record)
            data = product.to_document()
            data["createdAt"] = product.created_at or base + timedelta(days=i)
            data["updatedAt"] = data["createdAt"]
            ids.append(store.add(collection, data, f"p{i:02d}"))
        return ids

    return _seed
