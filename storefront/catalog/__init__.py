# Catalog facade
from ..errors import CatalogError, CatalogQueryError, ProductNotFoundError
from .service import CatalogService

__all__ = [
    'CatalogService',
    'CatalogError',
    'CatalogQueryError',
    'ProductNotFoundError',
]
