"""
Firestore error types.

The REST client maps HTTP/gRPC status codes onto these classes so callers
can match on the kind of failure instead of inspecting messages.
"""

from typing import Optional


class FirestoreError(Exception):
    """Any failed call to the document store."""

    def __init__(self, message: str, status_code: Optional[int] = None, status: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.status = status


class IndexUnavailableError(FirestoreError):
    """Query needs a composite index that does not exist."""


class DocumentNotFoundError(FirestoreError):
    """Document (or update precondition target) does not exist."""


class FirestoreConnectionError(FirestoreError):
    """Network-level failure: timeout, DNS, refused connection."""
