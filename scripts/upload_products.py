#!/usr/bin/env python3
"""
Product Upload Script

Loads raw product records into the Firestore products collection, skipping
SKUs that are already in the catalog.

Credentials come from the environment or .env:
    FIREBASE_PROJECT_ID     (required)
    FIREBASE_API_KEY        (web API key)
    FIREBASE_ACCESS_TOKEN   (OAuth bearer token, for locked-down rules)

Usage:
    # Upload the built-in sample sarees
    python3 scripts/upload_products.py --sample

    # Upload a JSON export one document at a time
    python3 scripts/upload_products.py --file data/saree.json

    # Large import in atomic batches of 500
    python3 scripts/upload_products.py --file data/saree.json --batched

    # Fetch the records over HTTP
    python3 scripts/upload_products.py --url https://example.com/saree.json
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from storefront.common.config_loader import load_settings
from storefront.common.log_config import setup_logging
from storefront.firestore import FirestoreAPIClient, FirestoreError
from storefront.ingestion import ProductUploader, load_records
from storefront.models import UploadProgress

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def print_progress(progress: UploadProgress) -> None:
    done = progress.uploaded + progress.errors
    print(f"  [{done}/{progress.total}] {progress.current} "
          f"(uploaded {progress.uploaded}, errors {progress.errors})")


def main():
    settings = load_settings()
    store_settings = settings.get("store", {})

    parser = argparse.ArgumentParser(
        description="Upload product records to the Firestore catalog"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--file", "-f",
        help="JSON file containing an array of product records"
    )
    source.add_argument(
        "--url", "-u",
        help="URL serving a JSON array of product records"
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Upload the built-in sample products (default when no source is given)"
    )
    parser.add_argument(
        "--batched",
        action="store_true",
        help="Write in atomic batches instead of one document at a time"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=store_settings.get("batch_size", 500),
        help="Writes per batch with --batched (max 500)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=store_settings.get("write_delay", 0.5),
        help="Seconds between writes (default: 0.5)"
    )
    parser.add_argument(
        "--collection", "-c",
        default=store_settings.get("collection", "products"),
        help="Target collection (default: products)"
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
        records = load_records(file=args.file, url=args.url)
    except (OSError, ValueError, requests.RequestException) as e:
        print(f"Could not load products: {e}")
        sys.exit(1)

    try:
        client = FirestoreAPIClient.from_env()
    except ValueError as e:
        print(f"[error] {e}")
        print("        Set it in .env or export it before running.")
        sys.exit(1)

    print("=" * 60)
    print("Product Upload")
    print("=" * 60)
    print(f"  Project: {client.project_id}")
    print(f"  Collection: {args.collection}")
    print(f"  Source: {args.file or args.url or 'built-in samples'}")
    print(f"  Records: {len(records)}")
    print(f"  Mode: {'batched' if args.batched else 'one by one'}")
    print()

    with client:
        try:
            uploader = ProductUploader(
                client,
                collection=args.collection,
                delay=args.delay,
                batch_size=args.batch_size,
            )
            if args.batched:
                summary = uploader.upload_batched(records, on_progress=print_progress)
            else:
                summary = uploader.upload(records, on_progress=print_progress)
        except (FirestoreError, ValueError) as e:
            logger.error("Upload aborted: %s", e)
            sys.exit(1)

    print()
    print("=" * 60)
    print("UPLOAD SUMMARY")
    print("=" * 60)
    print(f"  Uploaded: {summary.uploaded}")
    print(f"  Skipped (duplicates): {summary.skipped}")
    print(f"  Errors: {summary.errors}")
    print(f"  Total: {summary.total}")

    failed = [r for r in summary.results if not r.success]
    if failed:
        print("\nFailed products:")
        for result in failed:
            print(f"  - {result.name} ({result.sku}): {result.error}")

    sys.exit(1 if summary.errors else 0)


if __name__ == "__main__":
    main()
