"""
Product Uploader

Loads raw product records into the products collection.

Features:
- Duplicate skipping by SKU (existing catalog plus earlier records of the run)
- Continue-on-error: a failed write is counted and the run goes on
- Progress callback after every attempted write, in input order
- Delay between single writes to stay under the store's write rate
- Optional atomic batches of up to 500 writes for large imports
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

import requests

from ..common.constants import DEFAULT_COLLECTION, DEFAULT_WRITE_DELAY, MAX_BATCH_WRITES
from ..firestore import FirestoreError
from ..models import CanonicalProduct, RawRecord, UploadProgress, UploadResult, UploadSummary
from .dedup import DuplicateFilter
from .documents import product_to_document
from .transformer import RecordTransformer, get_transformer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[UploadProgress], None]

# Failures counted against a single record (or batch); anything else aborts the run
WRITE_ERRORS = (FirestoreError, requests.RequestException, ValueError, KeyError, TypeError)


class ProductUploader:
    """Bulk product upload with duplicate filtering and per-record error tracking."""

    def __init__(
        self,
        store,
        collection: str = DEFAULT_COLLECTION,
        delay: float = DEFAULT_WRITE_DELAY,
        batch_size: int = MAX_BATCH_WRITES,
        transformer: Optional[RecordTransformer] = None,
    ):
        """
        Initialize the uploader.

        Args:
            store: Document store (FirestoreAPIClient or compatible)
            collection: Products collection id
            delay: Seconds to wait between single-document writes
            batch_size: Writes per commit in upload_batched() (max 500)
            transformer: Record transformer (default: config-driven)
        """
        if not 1 <= batch_size <= MAX_BATCH_WRITES:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_WRITES}")

        self.store = store
        self.collection = collection
        self.delay = delay
        self.batch_size = batch_size
        self.transformer = transformer or get_transformer()

    def load_known_skus(self) -> DuplicateFilter:
        """Snapshot the SKUs already in the collection."""
        return DuplicateFilter.from_store(self.store, self.collection)

    @staticmethod
    def _report(on_progress: Optional[ProgressCallback], summary: UploadSummary, current: str) -> None:
        if on_progress is not None:
            on_progress(UploadProgress(
                uploaded=summary.uploaded,
                total=summary.total,
                skipped=summary.skipped,
                errors=summary.errors,
                current=current,
            ))

    def _transform_new(
        self,
        records: Sequence[RawRecord],
        dedup: DuplicateFilter,
        summary: UploadSummary,
    ):
        """Yield transformed records whose SKU is not yet known, counting skips."""
        for raw in records:
            product = self.transformer.transform(raw)
            if dedup.should_skip(product.sku):
                logger.info("Skipping '%s' - SKU already exists: %s", product.name, product.sku)
                summary.skipped += 1
                continue
            yield product

    def upload(
        self,
        records: Sequence[RawRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadSummary:
        """
        Upload records one document at a time.

        Args:
            records: Raw product records, uploaded in order
            on_progress: Called after each attempted write

        Returns:
            Final tallies with per-record results

        Raises:
            FirestoreError: Only if the existing SKUs cannot be read;
                write failures are counted, not raised
        """
        records = list(records)
        summary = UploadSummary(total=len(records))
        dedup = self.load_known_skus()
        logger.info("Uploading %d products to '%s' (one by one)", summary.total, self.collection)

        attempted = 0
        for product in self._transform_new(records, dedup, summary):
            if attempted and self.delay > 0:
                time.sleep(self.delay)
            attempted += 1

            try:
                doc_id = self.store.create_document(self.collection, product_to_document(product))
            except WRITE_ERRORS as e:
                summary.errors += 1
                summary.results.append(UploadResult(
                    success=False, name=product.name, sku=product.sku, error=str(e),
                ))
                logger.error("Error uploading '%s': %s", product.name, e)
            else:
                summary.uploaded += 1
                dedup.remember(product.sku)
                summary.results.append(UploadResult(
                    success=True, name=product.name, sku=product.sku, id=doc_id,
                ))
                logger.info("Uploaded (%d/%d): %s", summary.uploaded, summary.total, product.name)

            self._report(on_progress, summary, product.name)

        self._log_summary(summary)
        return summary

    def upload_batched(
        self,
        records: Sequence[RawRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadSummary:
        """
        Upload records in atomic batches of up to batch_size writes.

        Skip semantics match upload(). A failed commit marks every record of
        that batch as an error; nothing of the batch is written.
        """
        records = list(records)
        summary = UploadSummary(total=len(records))
        dedup = self.load_known_skus()
        logger.info("Uploading %d products to '%s' (batches of %d)",
                    summary.total, self.collection, self.batch_size)

        batch = self.store.batch()
        pending: List[Tuple[CanonicalProduct, str]] = []
        commits = 0

        for product in self._transform_new(records, dedup, summary):
            doc_id = batch.create(self.collection, product_to_document(product))
            # Claim the SKU now so a later record of this run cannot reuse it
            dedup.remember(product.sku)
            pending.append((product, doc_id))

            if len(pending) >= self.batch_size:
                if commits and self.delay > 0:
                    time.sleep(self.delay)
                self._commit(batch, pending, dedup, summary, on_progress)
                commits += 1
                batch = self.store.batch()
                pending = []

        if pending:
            if commits and self.delay > 0:
                time.sleep(self.delay)
            self._commit(batch, pending, dedup, summary, on_progress)

        self._log_summary(summary)
        return summary

    def _commit(
        self,
        batch,
        pending: List[Tuple[CanonicalProduct, str]],
        dedup: DuplicateFilter,
        summary: UploadSummary,
        on_progress: Optional[ProgressCallback],
    ) -> None:
        """Commit one batch and record the outcome of each of its records."""
        try:
            batch.commit()
        except WRITE_ERRORS as e:
            logger.error("Batch of %d products failed: %s", len(pending), e)
            for product, _ in pending:
                dedup.forget(product.sku)
                summary.errors += 1
                summary.results.append(UploadResult(
                    success=False, name=product.name, sku=product.sku, error=str(e),
                ))
                self._report(on_progress, summary, product.name)
            return

        logger.info("Uploaded batch of %d products", len(pending))
        for product, doc_id in pending:
            summary.uploaded += 1
            summary.results.append(UploadResult(
                success=True, name=product.name, sku=product.sku, id=doc_id,
            ))
            self._report(on_progress, summary, product.name)

    @staticmethod
    def _log_summary(summary: UploadSummary) -> None:
        logger.info("Upload summary: uploaded=%d, skipped=%d, errors=%d, total=%d",
                    summary.uploaded, summary.skipped, summary.errors, summary.total)
