"""
Query Planner

Turns a ProductQuery into one store query plus the client-side work the
store cannot do.

Plan:
- Server filters: category (unless "all"), featured, inStock > 0, rating >= x
- Server ordering only without a category filter, since category plus
  ordering needs a composite index; otherwise the sort runs client-side
- Search and the fabric/occasion/colour/price/sale refinements always run
  client-side
- If the store reports a missing index, retry with only the category
  filter and no ordering, then filter and sort locally (degraded page)
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, List, Optional, Sequence

from ..common.constants import DEFAULT_COLLECTION, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..errors import CatalogQueryError
from ..firestore import (
    Document,
    FieldFilter,
    FirestoreError,
    IndexUnavailableError,
    OrderBy,
    decode_value,
    encode_value,
)
from ..ingestion.documents import document_to_product
from ..ingestion.transformer import RecordTransformer
from ..models import ProductPage, ProductQuery
from .sorting import (
    DEFAULT_SORT,
    SERVER_SORTS,
    apply_server_filters,
    refine_products,
    sort_products,
)

logger = logging.getLogger(__name__)


def encode_cursor(order_by: Sequence[OrderBy], document: Document) -> str:
    """
    Opaque page token: the ordering, its values on the last document, and
    that document's id.
    """
    payload = {
        "order": [[o.field, o.descending] for o in order_by],
        "values": [encode_value(document.data.get(o.field)) for o in order_by],
        "id": document.id,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: Optional[str], order_by: Sequence[OrderBy]) -> Optional[List[Any]]:
    """
    Start-after values for a page token, or None.

    A token issued under a different ordering (or not a token at all) is
    ignored and the listing starts from the first page.
    """
    if not cursor:
        return None

    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
        order = [OrderBy(field, bool(descending)) for field, descending in payload["order"]]
        values = [decode_value(v) for v in payload["values"]]
        last_id = payload["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        logger.warning("Ignoring malformed cursor: %s", e)
        return None

    if order != list(order_by) or not last_id:
        logger.info("Cursor was issued for a different ordering, starting from the first page")
        return None
    return values + [last_id]


class QueryPlanner:
    """
    Executes listing requests against the products collection.

    Usage:
        planner = QueryPlanner(client)
        page = planner.plan(ProductQuery(category="silk", sort_by="price-low"))
        for product in page.products:
            print(product.name, product.price)
    """

    def __init__(
        self,
        store,
        collection: str = DEFAULT_COLLECTION,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        transformer: Optional[RecordTransformer] = None,
    ):
        self.store = store
        self.collection = collection
        self.page_size = page_size
        self.max_page_size = max_page_size
        self.transformer = transformer

    def page_limit(self, limit: Optional[int]) -> int:
        """Requested page size, defaulted and capped."""
        if not limit or limit <= 0:
            return self.page_size
        return min(limit, self.max_page_size)

    @staticmethod
    def server_filters(request: ProductQuery) -> List[FieldFilter]:
        filters = []
        category = request.category_filter
        if category:
            filters.append(FieldFilter("category", "==", category))
        if request.featured is not None:
            filters.append(FieldFilter("featured", "==", request.featured))
        if request.in_stock_only:
            filters.append(FieldFilter("inStock", ">", 0))
        if request.min_rating is not None:
            filters.append(FieldFilter("rating", ">=", float(request.min_rating)))
        return filters

    @staticmethod
    def server_order(request: ProductQuery) -> List[OrderBy]:
        """Ordering pushed to the store; empty when a category filter is present."""
        if request.category_filter:
            return []
        sort_by = request.sort_by or DEFAULT_SORT
        return list(SERVER_SORTS.get(sort_by, SERVER_SORTS[DEFAULT_SORT]))

    def _run(self, filters, order_by, limit, cursor) -> List[Document]:
        return self.store.run_query(
            self.collection,
            filters=filters,
            order_by=order_by,
            limit=limit,
            start_after=decode_cursor(cursor, order_by),
        )

    def plan(self, request: ProductQuery) -> ProductPage:
        """
        Fetch one page of products.

        Raises:
            CatalogQueryError: If the store fails for a reason other than a
                missing index, or the unindexed fallback fails too
        """
        limit = self.page_limit(request.limit)
        sort_by = request.sort_by or DEFAULT_SORT
        filters = self.server_filters(request)
        order_by = self.server_order(request)
        degraded = False

        try:
            documents = self._run(filters, order_by, limit, request.cursor)
        except IndexUnavailableError as e:
            logger.warning("Index unavailable for product query, falling back to client-side sort: %s", e)
            filters = filters[:1] if request.category_filter else []
            order_by = []
            degraded = True
            try:
                documents = self._run(filters, order_by, limit, request.cursor)
            except FirestoreError as fallback_error:
                logger.error("Fallback product query failed: %s", fallback_error)
                raise CatalogQueryError("Unable to fetch products") from fallback_error
        except FirestoreError as e:
            logger.error("Product query failed: %s", e)
            raise CatalogQueryError("Unable to fetch products") from e

        has_more = len(documents) == limit
        next_cursor = encode_cursor(order_by, documents[-1]) if has_more else None

        products = [document_to_product(doc, self.transformer) for doc in documents]
        if degraded:
            products = apply_server_filters(products, request)
        products = refine_products(products, request)

        # Sort locally unless the store already ordered by the requested mode
        if not order_by or order_by != list(SERVER_SORTS.get(sort_by, ())):
            products = sort_products(products, sort_by)

        logger.debug("Listed %d products (fetched=%d, has_more=%s, degraded=%s)",
                     len(products), len(documents), has_more, degraded)
        return ProductPage(
            products=products,
            has_more=has_more,
            cursor=next_cursor,
            degraded=degraded,
        )
