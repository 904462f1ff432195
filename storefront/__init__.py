"""
Storefront Catalog Tool

Modules:
    models      - Data models (CanonicalProduct, upload and query types)
    common      - Shared utilities (config loader, logging, value coercion)
    firestore   - Firestore REST client, value codec and write batches
    ingestion   - Record transformation, duplicate filtering and upload
    query       - Query planning with client-side fallback
    catalog     - Catalog facade consumed by the storefront
"""
