#!/usr/bin/env python3
"""
Product Listing Script

Runs a catalog listing the way the storefront does and prints the page.

Usage:
    # Newest products
    python3 scripts/list_products.py

    # Silk sarees, cheapest first
    python3 scripts/list_products.py --category silk --sort price-low

    # Search within in-stock products
    python3 scripts/list_products.py --search banarasi --in-stock

    # Next page
    python3 scripts/list_products.py --cursor <token printed by the previous run>

    # Categories and product count
    python3 scripts/list_products.py --stats
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from storefront.catalog import CatalogError, CatalogService
from storefront.common.config_loader import load_settings
from storefront.common.log_config import setup_logging
from storefront.firestore import FirestoreAPIClient, FirestoreError
from storefront.models import ProductQuery
from storefront.query import SORT_KEYS, QueryPlanner

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def main():
    settings = load_settings()
    query_settings = settings.get("query", {})
    collection = settings.get("store", {}).get("collection", "products")

    parser = argparse.ArgumentParser(
        description="List products from the Firestore catalog"
    )
    parser.add_argument("--category", help="Category id, or 'all'")
    parser.add_argument("--sort", choices=sorted(SORT_KEYS), help="Sort mode (default: newest)")
    parser.add_argument("--search", help="Case-insensitive text search")
    parser.add_argument("--featured", action="store_true", help="Featured products only")
    parser.add_argument("--in-stock", action="store_true", help="In-stock products only")
    parser.add_argument("--fabric", help="Fabric, e.g. Silk")
    parser.add_argument("--color", help="Colour, e.g. Maroon")
    parser.add_argument("--min-price", type=float, help="Minimum price")
    parser.add_argument("--max-price", type=float, help="Maximum price")
    parser.add_argument("--min-rating", type=float, help="Minimum rating, e.g. 4.0")
    parser.add_argument("--on-sale", action="store_true", help="Only products priced below their original price")
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=query_settings.get("page_size", 20),
        help="Page size (default: 20, max: 200)"
    )
    parser.add_argument("--cursor", help="Page token from a previous listing")
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print categories and product count instead of a listing"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        client = FirestoreAPIClient.from_env()
    except ValueError as e:
        print(f"[error] {e}")
        sys.exit(1)

    planner = QueryPlanner(
        client,
        collection,
        page_size=query_settings.get("page_size", 20),
        max_page_size=query_settings.get("max_page_size", 200),
    )
    catalog = CatalogService(client, collection, planner=planner)

    with client:
        try:
            if args.stats:
                categories = catalog.categories()
                print(f"Products: {catalog.count_products()}")
                print(f"Categories ({len(categories)}): {', '.join(categories)}")
                return

            page = catalog.list_products(ProductQuery(
                category=args.category,
                featured=True if args.featured else None,
                in_stock_only=args.in_stock,
                search=args.search,
                sort_by=args.sort,
                limit=args.limit,
                cursor=args.cursor,
                fabric=args.fabric,
                color=args.color,
                min_price=args.min_price,
                max_price=args.max_price,
                min_rating=args.min_rating,
                on_sale=args.on_sale,
            ))
        except (CatalogError, FirestoreError) as e:
            logger.error("Listing failed: %s", e)
            sys.exit(1)

    print("=" * 60)
    print(f"Products ({page.total})")
    print("=" * 60)
    for product in page.products:
        stock = product.in_stock if product.in_stock else "out of stock"
        print(f"  {product.sku:<18} {product.price:>10.2f}  {product.name}  [{product.category}, {stock}]")

    if page.degraded:
        print("\n  Note: served without a composite index (sorted locally)")
    if page.has_more:
        print(f"\nNext page: --cursor {page.cursor}")


if __name__ == "__main__":
    main()
