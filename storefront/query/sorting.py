"""
Client-side Sorting and Filtering

Comparator table for the listing sort modes and the refinements the store
cannot evaluate (free-text search, fabric/occasion/colour, price range,
sale items). Missing values sort as zero, so they come last in descending
order and first in ascending order. Ties are broken by document id in the
direction of the sort, the same implicit ordering the store applies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..common.text_utils import matches_search
from ..firestore import OrderBy
from ..models import CanonicalProduct, ProductQuery

logger = logging.getLogger(__name__)

DEFAULT_SORT = "newest"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# sort mode -> (key function, descending)
SORT_KEYS: Dict[str, Tuple[Callable[[CanonicalProduct], Any], bool]] = {
    "popularity": (lambda p: p.popularity or 0, True),
    "newest": (lambda p: p.created_at or _EPOCH, True),
    "price-low": (lambda p: p.price or 0, False),
    "price-high": (lambda p: p.price or 0, True),
    "rating": (lambda p: p.rating or 0, True),
    "discount": (lambda p: p.discount, True),
    "trending": (lambda p: (p.rating or 0, p.reviews or 0), True),
    "original-price": (lambda p: p.original_price or 0, True),
}

# Sort modes the store can evaluate itself (discount is derived, so it is not here)
SERVER_SORTS: Dict[str, Tuple[OrderBy, ...]] = {
    "popularity": (OrderBy("popularity", descending=True),),
    "newest": (OrderBy("createdAt", descending=True),),
    "price-low": (OrderBy("price"),),
    "price-high": (OrderBy("price", descending=True),),
    "rating": (OrderBy("rating", descending=True),),
    "trending": (OrderBy("rating", descending=True), OrderBy("reviews", descending=True)),
    "original-price": (OrderBy("originalPrice", descending=True),),
}


def sort_products(products: Iterable[CanonicalProduct], sort_by: Optional[str]) -> List[CanonicalProduct]:
    """
    Sort products by a listing sort mode.

    Unknown or empty modes leave the order unchanged. Equal values are
    ordered by id (ascending or descending with the mode); products without
    an id keep their relative order.
    """
    products = list(products)
    if not sort_by:
        return products
    if sort_by not in SORT_KEYS:
        logger.debug("Unknown sort mode '%s', keeping store order", sort_by)
        return products

    key, descending = SORT_KEYS[sort_by]
    return sorted(products, key=lambda p: (key(p), p.id or ""), reverse=descending)


def _equals_ignore_case(value: str, expected: str) -> bool:
    return bool(value) and value.lower() == expected.lower()


def refine_products(products: Iterable[CanonicalProduct], request: ProductQuery) -> List[CanonicalProduct]:
    """Apply the refinements that are always evaluated locally."""
    result = list(products)

    if request.search and request.search.strip():
        term = request.search.strip()
        result = [p for p in result if matches_search(term, p.name, p.description, p.category)]

    if request.fabric:
        result = [p for p in result if _equals_ignore_case(p.fabric, request.fabric)]

    if request.occasion:
        occasion = request.occasion.lower()
        result = [p for p in result if p.occasion and occasion in p.occasion.lower()]

    if request.color:
        result = [
            p for p in result
            if _equals_ignore_case(p.color, request.color)
            or any(_equals_ignore_case(c, request.color) for c in p.colors)
        ]

    if request.min_price is not None:
        result = [p for p in result if (p.price or 0) >= request.min_price]

    if request.max_price is not None:
        result = [p for p in result if (p.price or 0) <= request.max_price]

    if request.on_sale:
        result = [p for p in result if (p.original_price or 0) > (p.price or 0)]

    return result


def apply_server_filters(products: Iterable[CanonicalProduct], request: ProductQuery) -> List[CanonicalProduct]:
    """
    Evaluate the store-side filters locally.

    Used on the fallback path, where the store only filtered by category.
    """
    result = list(products)

    category = request.category_filter
    if category:
        result = [p for p in result if p.category == category]

    if request.featured is not None:
        result = [p for p in result if p.featured == request.featured]

    if request.in_stock_only:
        result = [p for p in result if p.in_stock > 0]

    if request.min_rating is not None:
        result = [p for p in result if (p.rating or 0) >= request.min_rating]

    return result
