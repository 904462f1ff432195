"""
Data models for the catalog.

This module contains pure data classes with no business logic.
"""

from .product import CanonicalProduct, RawRecord
from .query import ProductPage, ProductQuery
from .upload import UploadProgress, UploadResult, UploadSummary

__all__ = [
    'CanonicalProduct',
    'RawRecord',
    'ProductQuery',
    'ProductPage',
    'UploadProgress',
    'UploadResult',
    'UploadSummary',
]
