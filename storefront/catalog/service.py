"""
Catalog Service

Public surface of the catalog for the storefront and admin screens:
listing, lookup, search and product maintenance on top of the query
planner and the store's single-document operations.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..common.constants import (
    DEFAULT_CATEGORY_PAGE_SIZE,
    DEFAULT_COLLECTION,
    DEFAULT_FEATURED_PAGE_SIZE,
    DEFAULT_SALE_PAGE_SIZE,
    DEFAULT_TRENDING_PAGE_SIZE,
    MAX_BATCH_WRITES,
    TRENDING_MIN_RATING,
)
from ..common.value_utils import to_number
from ..errors import ProductNotFoundError
from ..firestore import SERVER_TIMESTAMP, DocumentNotFoundError
from ..ingestion.documents import document_to_product, product_to_document
from ..ingestion.transformer import RecordTransformer, get_transformer
from ..models import CanonicalProduct, ProductPage, ProductQuery, RawRecord
from ..query import QueryPlanner

logger = logging.getLogger(__name__)

# Stored fields an update never overwrites
PROTECTED_FIELDS = ("id", "createdAt")

# Fields rewritten along with the changed field they are derived from
DERIVED_FIELDS = {
    "reviews": ("popularity",),
    "rating": ("popularity",),
    "images": ("image", "images"),
    "image": ("image", "images"),
    "imageUrl": ("image", "images"),
}


def _stock_count(product_id: str, stock: Any) -> int:
    number = to_number(stock)
    if number is None or number < 0:
        raise ValueError(f"Invalid stock for {product_id}: {stock!r}")
    return int(number)


class CatalogService:
    """
    Catalog facade over an injected document store.

    Usage:
        catalog = CatalogService(client)
        page = catalog.list_products(ProductQuery(category="silk", sort_by="price-low"))
        product = catalog.get_product(page.products[0].id)
    """

    def __init__(
        self,
        store,
        collection: str = DEFAULT_COLLECTION,
        planner: Optional[QueryPlanner] = None,
        transformer: Optional[RecordTransformer] = None,
    ):
        """
        Initialize the service.

        Args:
            store: Document store (FirestoreAPIClient or compatible)
            collection: Products collection id
            planner: Query planner (default: planner over the same collection)
            transformer: Record transformer (default: config-driven)
        """
        self.store = store
        self.collection = collection
        self.transformer = transformer or get_transformer()
        self.planner = planner or QueryPlanner(store, collection, transformer=self.transformer)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_products(self, query: Optional[ProductQuery] = None) -> ProductPage:
        """
        List products matching a query.

        Raises:
            CatalogQueryError: If the store cannot serve the listing
        """
        return self.planner.plan(query or ProductQuery())

    def get_product(self, product_id: str) -> CanonicalProduct:
        """
        Fetch one product by document id.

        Raises:
            ProductNotFoundError: If no such product exists
        """
        if not product_id:
            raise ProductNotFoundError(product_id)
        try:
            document = self.store.get_document(self.collection, product_id)
        except DocumentNotFoundError as e:
            raise ProductNotFoundError(product_id) from e
        return document_to_product(document, self.transformer)

    def products_by_category(
        self,
        category: str,
        limit: int = DEFAULT_CATEGORY_PAGE_SIZE,
    ) -> List[CanonicalProduct]:
        """Newest products of one category."""
        page = self.list_products(ProductQuery(category=category, limit=limit))
        return page.products

    def search_products(self, term: str, query: Optional[ProductQuery] = None) -> ProductPage:
        """
        Listing narrowed by a case-insensitive search term.

        The term is matched against name, description and category of the
        fetched page; there is no relevance ranking.
        """
        return self.list_products(dataclasses.replace(query or ProductQuery(), search=term))

    def featured_products(self, limit: int = DEFAULT_FEATURED_PAGE_SIZE) -> List[CanonicalProduct]:
        """Newest featured products, or the newest products when none are featured."""
        page = self.list_products(ProductQuery(featured=True, sort_by="newest", limit=limit))
        if page.products:
            return page.products

        logger.info("No featured products, showing latest products instead")
        return self.list_products(ProductQuery(sort_by="newest", limit=limit)).products

    def trending_products(self, limit: int = DEFAULT_TRENDING_PAGE_SIZE) -> List[CanonicalProduct]:
        """Products rated 4.0 or better, highest rating first, then most reviewed."""
        query = ProductQuery(min_rating=TRENDING_MIN_RATING, sort_by="trending", limit=limit)
        return self.list_products(query).products

    def sale_products(self, limit: int = DEFAULT_SALE_PAGE_SIZE) -> List[CanonicalProduct]:
        """
        Discounted products, highest original price first.

        Fetches twice the requested number by original price and keeps the
        ones priced below their original price, so fewer than `limit` may
        come back even when more sale items exist.
        """
        query = ProductQuery(sort_by="original-price", on_sale=True, limit=limit * 2)
        return self.list_products(query).products[:limit]

    def categories(self) -> List[str]:
        """Distinct non-empty categories in use, sorted."""
        found = set()
        for document in self.store.stream(self.collection, select=["category"]):
            category = document.data.get("category")
            if category:
                found.add(category)
        return sorted(found)

    def count_products(self) -> int:
        """Number of products in the collection."""
        return sum(1 for _ in self.store.stream(self.collection, select=["sku"]))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_product(self, record: RawRecord) -> CanonicalProduct:
        """
        Normalize a raw record and store it as a new product.

        Returns:
            The stored product with its new document id. created_at and
            updated_at are assigned by the server and left as None here.
        """
        product = self.transformer.transform(record)
        product.created_at = None
        product.id = self.store.create_document(self.collection, product_to_document(product))
        logger.info("Created product '%s' (%s)", product.name, product.id)
        return product

    def _normalize_changes(self, product_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Apply import defaults to a partial update.

        The changes are laid over the stored document and the result goes
        through the record transformer, so an edited price, rating or stock
        count is stored exactly as an import would store it. Fields outside
        the product schema are written as given.
        """
        try:
            current = self.store.get_document(self.collection, product_id)
        except DocumentNotFoundError as e:
            raise ProductNotFoundError(product_id) from e

        merged = dict(current.data)
        merged.update(changes)
        normalized = self.transformer.transform(merged).to_document()

        data = {}
        for key, value in changes.items():
            if key in PROTECTED_FIELDS:
                continue
            data[key] = normalized.get(key, value)
            for derived in DERIVED_FIELDS.get(key, ()):
                data[derived] = normalized[derived]
        return data

    def update_product(self, product_id: str, changes: Mapping[str, Any]) -> None:
        """
        Update stored fields of a product.

        Values get the same defaults as imported records (a rating of 0
        becomes 4.5, a negative stock count 0), and popularity follows
        reviews and rating.

        Args:
            product_id: Document id
            changes: Fields to set, using stored field names (e.g. "inStock")

        Raises:
            ProductNotFoundError: If no such product exists
        """
        data = self._normalize_changes(product_id, changes)
        data["updatedAt"] = SERVER_TIMESTAMP

        try:
            self.store.update_document(self.collection, product_id, data)
        except DocumentNotFoundError as e:
            raise ProductNotFoundError(product_id) from e
        logger.info("Updated product %s: %s", product_id, ", ".join(sorted(changes)))

    def update_stock(self, product_id: str, stock: int) -> None:
        """
        Set the stock count of a product.

        Numeric strings are accepted; fractions are truncated.

        Raises:
            ValueError: If stock is negative or not a number
            ProductNotFoundError: If no such product exists
        """
        self.update_product(product_id, {"inStock": _stock_count(product_id, stock)})

    def bulk_update_stock(self, updates: Mapping[str, int]) -> int:
        """
        Set stock counts for many products.

        Writes are committed in atomic batches of up to 500; a failing batch
        raises and leaves earlier batches applied.

        Returns:
            Number of products updated

        Raises:
            ValueError: If any stock value is negative or not a number
                (nothing is written)
            FirestoreError: If a batch commit fails
        """
        counts = {product_id: _stock_count(product_id, stock) for product_id, stock in updates.items()}

        updated = 0
        batch = self.store.batch()
        for product_id, stock in counts.items():
            batch.update(self.collection, product_id, {
                "inStock": stock,
                "updatedAt": SERVER_TIMESTAMP,
            })
            if len(batch) >= MAX_BATCH_WRITES:
                batch.commit()
                updated += MAX_BATCH_WRITES
                batch = self.store.batch()

        remaining = len(batch)
        batch.commit()
        updated += remaining

        logger.info("Updated stock for %d products", updated)
        return updated

    def delete_product(self, product_id: str) -> None:
        """Permanently delete a product. Deleting a missing product is a no-op."""
        self.store.delete_document(self.collection, product_id)
        logger.info("Deleted product %s", product_id)
