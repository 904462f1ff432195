"""
Firestore API Client

Client for the Cloud Firestore REST API (v1).
Handles authentication, rate limiting, retries and error mapping.
"""

import logging
import os
import time
from typing import Any, Dict, Iterator, List, Optional, Sequence

import requests

from ..common.constants import DEFAULT_COLLECTION
from .batch import Write, WriteBatch
from .codec import decode_fields, encode_fields, encode_value
from .errors import (
    DocumentNotFoundError,
    FirestoreConnectionError,
    FirestoreError,
    IndexUnavailableError,
)
from .query import Document, FieldFilter, OrderBy, build_structured_query, quote_field_path

logger = logging.getLogger(__name__)


class FirestoreAPIClient:
    """
    Client for the Firestore REST API.

    Handles:
    - Authentication (API key and/or OAuth bearer token)
    - Rate limiting (minimum interval between requests)
    - Retries on 429 and 5xx responses
    - Mapping error responses to typed exceptions
      (missing composite index -> IndexUnavailableError)

    Usage:
        client = FirestoreAPIClient(project_id="my-shop", api_key="AIza...")

        docs = client.run_query(
            "products",
            filters=[FieldFilter("category", "==", "silk")],
            order_by=[OrderBy("price")],
            limit=20,
        )
        doc_id = client.create_document("products", {"name": "Silk Saree"})
    """

    BASE_URL = "https://firestore.googleapis.com/v1"
    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
    STREAM_PAGE_SIZE = 300

    def __init__(
        self,
        project_id: str,
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        database: str = "(default)",
    ):
        """
        Initialize the API client.

        Args:
            project_id: Google Cloud / Firebase project id
            api_key: Web API key, sent as the ?key= parameter
            access_token: OAuth 2.0 bearer token (service account or user)
            database: Database id
        """
        self.project_id = project_id
        self.database_path = f"projects/{project_id}/databases/{database}"
        self.documents_path = f"{self.database_path}/documents"
        self.documents_url = f"{self.BASE_URL}/{self.documents_path}"

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"
        self.params = {"key": api_key} if api_key else {}

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.1  # 10 req/sec

    @classmethod
    def from_env(cls) -> "FirestoreAPIClient":
        """
        Build a client from FIREBASE_PROJECT_ID, FIREBASE_API_KEY and
        FIREBASE_ACCESS_TOKEN.

        Raises:
            ValueError: If FIREBASE_PROJECT_ID is not set
        """
        project_id = os.getenv("FIREBASE_PROJECT_ID", "")
        if not project_id:
            raise ValueError("FIREBASE_PROJECT_ID is not set")
        return cls(
            project_id,
            api_key=os.getenv("FIREBASE_API_KEY") or None,
            access_token=os.getenv("FIREBASE_ACCESS_TOKEN") or None,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Space requests at least min_request_interval apart."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    @staticmethod
    def _error_from_response(response) -> FirestoreError:
        """Build the matching exception for an error response."""
        message = response.text[:200]
        status = ""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        # runQuery wraps errors in a one-element array
        if isinstance(payload, list) and payload:
            payload = payload[0]
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            message = payload["error"].get("message", message)
            status = payload["error"].get("status", "")

        if status == "FAILED_PRECONDITION" and "index" in message.lower():
            return IndexUnavailableError(message, response.status_code, status)
        if response.status_code == 404 or status == "NOT_FOUND":
            return DocumentNotFoundError(message, response.status_code, status)
        return FirestoreError(message, response.status_code, status)

    def request(
        self,
        method: str,
        url: str,
        data: Optional[Dict] = None,
        timeout: int = 30
    ) -> Any:
        """
        Make an API request with rate limiting and retries.

        Args:
            method: HTTP method (GET, POST)
            url: Full endpoint URL
            data: JSON body for POST
            timeout: Request timeout in seconds

        Returns:
            Decoded JSON response ({} for an empty body)

        Raises:
            FirestoreError: On an error response, after retries are exhausted,
                or (as FirestoreConnectionError) on a network failure
        """
        last_status = None

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                if method == "GET":
                    response = self.session.get(url, params=self.params, timeout=timeout)
                elif method == "POST":
                    response = self.session.post(url, params=self.params, json=data, timeout=timeout)
                else:
                    raise ValueError(f"Unsupported method: {method}")
            except requests.exceptions.Timeout as e:
                raise FirestoreConnectionError(f"Request timeout: {url}") from e
            except requests.exceptions.RequestException as e:
                raise FirestoreConnectionError(f"Request failed: {e}") from e

            # Retry on rate limiting or server errors
            if response.status_code in self.RETRYABLE_STATUS_CODES:
                last_status = response.status_code
                retry_after = int(response.headers.get("Retry-After", 2 ** attempt))
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               response.status_code, url, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code >= 400:
                error = self._error_from_response(response)
                logger.debug("API Error %d: %s", response.status_code, error)
                raise error

            if not response.content:
                return {}
            return response.json()

        raise FirestoreError(
            f"Max retries ({self.MAX_RETRIES}) exceeded for {method} {url}",
            status_code=last_status,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _document_name(self, collection: str, doc_id: str) -> str:
        return f"{self.documents_path}/{collection}/{doc_id}"

    @staticmethod
    def _decode_document(raw: Dict[str, Any]) -> Document:
        name = raw.get("name", "")
        return Document(
            id=name.rsplit("/", 1)[-1],
            data=decode_fields(raw.get("fields", {})),
            name=name,
        )

    def run_query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: Optional[int] = None,
        start_after: Optional[Sequence[Any]] = None,
        select: Optional[Sequence[str]] = None,
    ) -> List[Document]:
        """
        Run a structured query against one collection.

        Args:
            collection: Collection id
            filters: Conditions combined with AND
            order_by: Sort keys
            limit: Maximum number of documents
            start_after: Cursor: one value per sort key, then the id of the
                last document of the previous page
            select: Field paths to return

        Returns:
            Matching documents in query order

        Raises:
            IndexUnavailableError: If the query needs a missing composite index
            FirestoreError: On any other failure
        """
        cursor = None
        if start_after:
            *values, last_id = start_after
            cursor = [encode_value(v) for v in values]
            cursor.append({"referenceValue": self._document_name(collection, last_id)})

        payload = {
            "structuredQuery": build_structured_query(
                collection, filters, order_by, limit, cursor, select,
            )
        }
        result = self.request("POST", f"{self.documents_url}:runQuery", payload)

        documents = []
        for item in result or []:
            if "error" in item:
                raise FirestoreError(
                    item["error"].get("message", "Query failed"),
                    item["error"].get("code"),
                    item["error"].get("status", ""),
                )
            if "document" in item:
                documents.append(self._decode_document(item["document"]))
        return documents

    def stream(
        self,
        collection: str,
        select: Optional[Sequence[str]] = None,
        page_size: Optional[int] = None,
    ) -> Iterator[Document]:
        """
        Iterate over every document of a collection, one page at a time.

        Args:
            collection: Collection id
            select: Field paths to return
            page_size: Documents per request
        """
        page_size = page_size or self.STREAM_PAGE_SIZE
        last_id = None

        while True:
            page = self.run_query(
                collection,
                limit=page_size,
                start_after=[last_id] if last_id else None,
                select=select,
            )
            yield from page
            if len(page) < page_size:
                break
            last_id = page[-1].id

    def get_document(self, collection: str, doc_id: str) -> Document:
        """
        Fetch a single document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        url = f"{self.documents_url}/{collection}/{doc_id}"
        return self._decode_document(self.request("GET", url))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _encode_write(self, write: Write) -> Dict[str, Any]:
        name = self._document_name(write.collection, write.doc_id)
        if write.op == "delete":
            return {"delete": name}

        fields, server_time_paths = encode_fields(write.data)
        encoded: Dict[str, Any] = {"update": {"name": name, "fields": fields}}

        if write.op == "create":
            encoded["currentDocument"] = {"exists": False}
        elif write.op == "update":
            encoded["currentDocument"] = {"exists": True}
            encoded["updateMask"] = {"fieldPaths": [quote_field_path(p) for p in fields]}
        else:
            raise ValueError(f"Unsupported write: {write.op}")

        if server_time_paths:
            encoded["updateTransforms"] = [
                {"fieldPath": quote_field_path(p), "setToServerValue": "REQUEST_TIME"}
                for p in server_time_paths
            ]
        return encoded

    def commit_writes(self, writes: Sequence[Write]) -> None:
        """
        Apply writes atomically: either all succeed or none do.

        Raises:
            DocumentNotFoundError: If an update targets a missing document
            FirestoreError: On any other failure
        """
        payload = {"writes": [self._encode_write(w) for w in writes]}
        self.request("POST", f"{self.documents_url}:commit", payload)

    def batch(self) -> WriteBatch:
        """Start a new atomic write batch."""
        return WriteBatch(self)

    def create_document(self, collection: str, data: Dict[str, Any], doc_id: str = "") -> str:
        """Create a document and return its id."""
        batch = self.batch()
        doc_id = batch.create(collection, data, doc_id)
        batch.commit()
        return doc_id

    def update_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """
        Update the given fields of an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        batch = self.batch()
        batch.update(collection, doc_id, data)
        batch.commit()

    def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete a document (a missing document is not an error)."""
        batch = self.batch()
        batch.delete(collection, doc_id)
        batch.commit()

    def test_connection(self, collection: str = DEFAULT_COLLECTION) -> bool:
        """
        Test API access by reading one document.

        Returns:
            True if the query succeeded
        """
        try:
            self.run_query(collection, limit=1)
        except FirestoreError as e:
            logger.error("Connection test failed: %s", e)
            return False
        logger.info("Connected to project: %s", self.project_id)
        return True
