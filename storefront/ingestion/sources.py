"""
Record Sources

Raw product records come from the built-in sample list, a JSON file
(e.g. saree.json) or a JSON array served over HTTP.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Magenta Silk Saree",
        "category": "silk",
        "color": "Magenta",
        "size": 5.5,
        "price": 4999,
        "originalPrice": 7499,
        "weight": 650,
        "occasion": "Wedding",
        "features": ["Gold Zari Border", "Traditional Weave"],
        "imageUrl": "https://i.pinimg.com/736x/8a/e0/f8/8ae0f80209332b243b0d93fb497cc4fa.jpg",
    },
    {
        "name": "Royal Blue Designer Saree",
        "category": "designer",
        "color": "Royal Blue",
        "size": 5.8,
        "price": 5799,
        "originalPrice": 8299,
        "weight": 600,
        "occasion": "Party Wear",
        "features": ["Stone Work", "Designer Blouse"],
        "imageUrl": "https://i.pinimg.com/736x/59/08/f4/5908f4b1985c6dac02640866c7944a02.jpg",
    },
    {
        "name": "Teal Cotton Printed Saree",
        "category": "cotton",
        "color": "Teal",
        "size": 6.3,
        "price": 1599,
        "originalPrice": 2299,
        "weight": 480,
        "occasion": "Casual Wear",
        "features": ["Printed Pattern", "Soft Fabric"],
        "imageUrl": "https://i.pinimg.com/736x/28/1c/18/281c185273c799c2a68ea4f8623ad773.jpg",
    },
    {
        "name": "Maroon Bridal Silk Saree",
        "category": "wedding",
        "color": "Maroon",
        "size": 5.5,
        "price": 8499,
        "originalPrice": 11500,
        "weight": 720,
        "occasion": "Wedding",
        "features": ["Heavy Zari Work", "Rich Pallu"],
        "imageUrl": "https://www.bangaloredesignerboutique.com/wp-content/uploads/2024/01/Set-4-image-3.jpg",
    },
    {
        "name": "Golden Yellow Festive Saree",
        "category": "silk",
        "color": "Golden Yellow",
        "size": 5.5,
        "price": 3999,
        "originalPrice": 5999,
        "weight": 580,
        "occasion": "Festive",
        "features": ["Shimmer Finish", "Contrasting Border"],
        "imageUrl": "https://i.pinimg.com/736x/43/7d/fa/437dfaebf0deff4931d02e05d6025ca7.jpg",
    },
]


def _ensure_record_list(data: Any, source: str) -> List[Dict[str, Any]]:
    """Validate that parsed JSON is an array and keep only its objects."""
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of products in {source}")

    records = [item for item in data if isinstance(item, dict)]
    dropped = len(data) - len(records)
    if dropped:
        logger.warning("Ignored %d non-object entries in %s", dropped, source)
    return records


def load_records_from_file(path: str) -> List[Dict[str, Any]]:
    """
    Load raw records from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON array
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Product file not found: {path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    records = _ensure_record_list(data, str(file_path))
    logger.info("Found %d products in %s", len(records), file_path.name)
    return records


def fetch_records(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: int = 30,
) -> List[Dict[str, Any]]:
    """
    Fetch raw records from a URL serving a JSON array.

    Raises:
        requests.RequestException: On network or HTTP errors
        ValueError: If the response is not a JSON array
    """
    http = session or requests.Session()
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    finally:
        if session is None:
            http.close()

    records = _ensure_record_list(data, url)
    logger.info("Fetched %d products from %s", len(records), url)
    return records


def load_records(
    file: Optional[str] = None,
    url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Load records from a file, a URL, or (neither given) the sample list.
    """
    if file:
        return load_records_from_file(file)
    if url:
        return fetch_records(url)
    logger.info("Using %d built-in sample products", len(SAMPLE_PRODUCTS))
    return [dict(record) for record in SAMPLE_PRODUCTS]
