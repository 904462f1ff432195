"""
Duplicate Filter

Decides whether an incoming record is already in the catalog, by SKU.

The known-SKU set is a point-in-time snapshot taken before an ingestion run
starts, extended in memory with every SKU the run writes. It is local to one
run: two runs started concurrently do not see each other's writes and can
both import the same SKU. The store has no unique constraint to catch this.
"""

import logging
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)


def should_skip(sku: str, known_skus: Set[str]) -> bool:
    """True if a record with this SKU is already in the catalog."""
    return sku in known_skus


class DuplicateFilter:
    """
    Tracks SKUs already present in the catalog during one ingestion run.

    Usage:
        dedup = DuplicateFilter.from_store(client, "products")
        if not dedup.should_skip(product.sku):
            ...write...
            dedup.remember(product.sku)
    """

    def __init__(self, known_skus: Optional[Iterable[str]] = None):
        self.known_skus: Set[str] = set(known_skus or ())

    @classmethod
    def from_store(cls, store, collection: str) -> "DuplicateFilter":
        """
        Snapshot existing SKUs with a single streaming read of the sku field.

        Args:
            store: Document store providing stream(collection, select=...)
            collection: Products collection id
        """
        known = set()
        for document in store.stream(collection, select=["sku"]):
            sku = document.data.get("sku")
            if sku:
                known.add(sku)
        logger.info("Found %d existing SKUs in '%s'", len(known), collection)
        return cls(known)

    def should_skip(self, sku: str) -> bool:
        """True if this SKU is known (existing or written earlier in the run)."""
        return should_skip(sku, self.known_skus)

    def remember(self, sku: str) -> None:
        """Record a SKU written by this run."""
        self.known_skus.add(sku)

    def forget(self, sku: str) -> None:
        """Drop a SKU whose write did not persist."""
        self.known_skus.discard(sku)

    def __len__(self) -> int:
        return len(self.known_skus)

    def __contains__(self, sku: str) -> bool:
        return sku in self.known_skus
