"""
Write Batches

Collects create/update/delete operations and commits them atomically
through the owning store's commit_writes().
"""

import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..common.constants import MAX_BATCH_WRITES

_AUTO_ID_ALPHABET = string.ascii_letters + string.digits
_AUTO_ID_LENGTH = 20


def auto_id() -> str:
    """Random 20-character document id, same shape as the client SDKs produce."""
    return ''.join(random.choice(_AUTO_ID_ALPHABET) for _ in range(_AUTO_ID_LENGTH))


@dataclass
class Write:
    """
    One pending write.

    op is "create" (document must not exist), "update" (document must
    exist; only the given fields change) or "delete".
    """
    op: str
    collection: str
    doc_id: str
    data: Dict[str, Any] = field(default_factory=dict)


class WriteBatch:
    """
    Atomic group of writes.

    Usage:
        batch = store.batch()
        doc_id = batch.create("products", {"name": "Silk Saree"})
        batch.update("products", "abc123", {"inStock": 4})
        batch.commit()
    """

    def __init__(self, store, max_writes: int = MAX_BATCH_WRITES):
        """
        Args:
            store: Object providing commit_writes(writes)
            max_writes: Upper bound on writes per commit
        """
        self._store = store
        self.max_writes = max_writes
        self.writes: List[Write] = []

    def __len__(self) -> int:
        return len(self.writes)

    @property
    def is_full(self) -> bool:
        return len(self.writes) >= self.max_writes

    def _add(self, write: Write) -> None:
        if self.is_full:
            raise ValueError(f"Batch already holds the maximum of {self.max_writes} writes")
        self.writes.append(write)

    def create(self, collection: str, data: Dict[str, Any], doc_id: str = "") -> str:
        """Queue a new document; returns its id (generated when not given)."""
        doc_id = doc_id or auto_id()
        self._add(Write("create", collection, doc_id, dict(data)))
        return doc_id

    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Queue a partial update of an existing document."""
        self._add(Write("update", collection, doc_id, dict(data)))

    def delete(self, collection: str, doc_id: str) -> None:
        """Queue a document deletion."""
        self._add(Write("delete", collection, doc_id))

    def commit(self) -> None:
        """Apply all queued writes atomically, then empty the batch."""
        if not self.writes:
            return
        self._store.commit_writes(self.writes)
        self.writes = []
