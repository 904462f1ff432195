"""
Catalog ingestion modules.

Modules:
    transformer - RecordTransformer: raw record -> CanonicalProduct
    dedup - DuplicateFilter: SKU snapshot for skipping existing products
    uploader - ProductUploader: single and batched writes with progress
    documents - CanonicalProduct <-> stored document conversion
    sources - Sample records, JSON files and JSON over HTTP
"""

from .dedup import DuplicateFilter, should_skip
from .documents import document_to_product, product_to_document
from .sources import SAMPLE_PRODUCTS, fetch_records, load_records, load_records_from_file
from .transformer import RecordTransformer, get_transformer, normalize_images, transform_record
from .uploader import ProductUploader

__all__ = [
    # Transformation
    'RecordTransformer',
    'get_transformer',
    'transform_record',
    'normalize_images',
    # Duplicate filtering
    'DuplicateFilter',
    'should_skip',
    # Upload
    'ProductUploader',
    # Documents
    'product_to_document',
    'document_to_product',
    # Sources
    'SAMPLE_PRODUCTS',
    'load_records',
    'load_records_from_file',
    'fetch_records',
]
