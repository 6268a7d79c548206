#!/usr/bin/env python3
"""
Delete the images recorded by seed_images.py.

Run:
    poetry run python seed/cleanup_images.py --api-id <API-ID> [--ids-file <FILE>]
"""

import argparse
from pathlib import Path
import sys

from api_client import ImageApiClient
from aws_lambda_powertools import Logger

logger = Logger(service="cleanup")

DEFAULT_IDS_FILE = Path(__file__).parent / "seeded_ids.txt"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup seeded images via Image Storage API")
    parser.add_argument("--api-id", required=True, help="LocalStack API Gateway ID")
    parser.add_argument("--api-key", default=None, help="Value for the x-api-key header")
    parser.add_argument("--ids-file", type=Path, default=DEFAULT_IDS_FILE, help="IDs file")
    return parser.parse_args()


def read_ids(ids_file: Path) -> list[str]:
    if not ids_file.exists():
        return []

    return [line.strip() for line in ids_file.read_text().splitlines() if line.strip()]


def cleanup_images() -> None:
    args = parse_args()
    image_ids = read_ids(args.ids_file)

    if not image_ids:
        logger.info("No images found for cleanup", extra={"ids_file": str(args.ids_file)})
        return

    client = ImageApiClient.for_local_api(args.api_id, args.api_key)

    try:
        response = client.delete(image_ids)
    except Exception as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)

    if not response.ok:
        logger.error(
            "Bulk delete rejected",
            extra={"status": response.status_code, "response": response.text},
        )
        sys.exit(1)

    args.ids_file.unlink()
    logger.info("Cleanup completed", extra={"deleted": len(image_ids)})


if __name__ == "__main__":
    cleanup_images()
