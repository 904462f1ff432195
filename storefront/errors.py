"""
Catalog error types raised to storefront callers.
"""


class CatalogError(Exception):
    """Base class for catalog failures."""


class ProductNotFoundError(CatalogError):
    """No product with the requested id."""

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CatalogQueryError(CatalogError):
    """Listing failed even after the unindexed fallback query."""
