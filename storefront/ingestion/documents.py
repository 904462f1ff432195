"""
Product Documents

Conversion between CanonicalProduct and stored documents.
"""

from typing import Any, Dict, Optional

from ..common.value_utils import parse_timestamp, to_text
from ..firestore import SERVER_TIMESTAMP, Document
from ..models import CanonicalProduct
from .transformer import RecordTransformer, get_transformer


def product_to_document(product: CanonicalProduct) -> Dict[str, Any]:
    """
    Document fields for writing a product.

    updatedAt is always the server time; createdAt too unless the product
    already carries a creation time.
    """
    data = product.to_document()
    data["updatedAt"] = SERVER_TIMESTAMP
    if product.created_at is None:
        data["createdAt"] = SERVER_TIMESTAMP
    return data


def document_to_product(
    document: Document,
    transformer: Optional[RecordTransformer] = None,
) -> CanonicalProduct:
    """
    Read a stored document back into a CanonicalProduct.

    Stored documents go through the same normalization as imports, so
    records written by older versions (string images, missing fields)
    still come back complete.
    """
    transformer = transformer or get_transformer()
    product = transformer.transform(document.data)
    product.id = document.id
    product.updated_at = parse_timestamp(document.data.get("updatedAt"))
    if not to_text(document.data.get("sku")):
        # Legacy documents without a SKU are identified by document id
        product.sku = f"SKU-{document.id}"
    return product
