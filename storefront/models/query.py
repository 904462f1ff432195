"""
Listing request and response models.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .product import CanonicalProduct


@dataclass
class ProductQuery:
    """
    Declarative listing request.

    Server-side filters: category, featured, in_stock_only, min_rating.
    Client-side refinements: search, fabric, occasion, color, min_price, max_price, on_sale.
    """
    category: Optional[str] = None      # "all" means no category filter
    featured: Optional[bool] = None
    in_stock_only: bool = False
    min_rating: Optional[float] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None       # see query.sorting.SORT_KEYS
    limit: Optional[int] = None
    cursor: Optional[str] = None
    fabric: Optional[str] = None
    occasion: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    on_sale: bool = False               # originalPrice above price

    @property
    def category_filter(self) -> Optional[str]:
        """Category to filter on, or None when listing every category."""
        if self.category and self.category != "all":
            return self.category
        return None


@dataclass
class ProductPage:
    """One page of listing results."""
    products: List[CanonicalProduct] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None
    degraded: bool = False      # True when served by the unindexed fallback query

    @property
    def total(self) -> int:
        return len(self.products)
