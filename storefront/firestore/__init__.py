"""
Firestore integration modules.

Modules:
    api_client - REST client for the Firestore v1 API
    batch - Atomic write batches
    codec - Python <-> Firestore typed value conversion
    query - Filters, sort keys and structuredQuery building
    errors - Typed store failures
"""

from .api_client import FirestoreAPIClient
from .batch import Write, WriteBatch, auto_id
from .codec import SERVER_TIMESTAMP, decode_value, encode_value
from .errors import (
    DocumentNotFoundError,
    FirestoreConnectionError,
    FirestoreError,
    IndexUnavailableError,
)
from .query import Document, FieldFilter, OrderBy

__all__ = [
    # API Client
    'FirestoreAPIClient',
    # Writes
    'Write',
    'WriteBatch',
    'auto_id',
    'SERVER_TIMESTAMP',
    # Queries
    'Document',
    'FieldFilter',
    'OrderBy',
    # Codec
    'encode_value',
    'decode_value',
    # Errors
    'FirestoreError',
    'IndexUnavailableError',
    'DocumentNotFoundError',
    'FirestoreConnectionError',
]
