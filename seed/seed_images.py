#!/usr/bin/env python3
"""
Upload sample images through the API and record their IDs.

Run:
    poetry run python seed/seed_images.py --api-id <API-ID> [--images-dir <DIR>]

Without --images-dir, solid-colour PNG swatches are generated with Pillow.
IDs go to --output (one per line) for cleanup_images.py.
"""

import argparse
from collections.abc import Iterator
from io import BytesIO
import mimetypes
from pathlib import Path
import sys

from api_client import ImageApiClient
from aws_lambda_powertools import Logger
from PIL import Image

logger = Logger(service="seed")

DEFAULT_IDS_FILE = Path(__file__).parent / "seeded_ids.txt"

SWATCH_COLORS = ((220, 20, 60), (30, 144, 255), (50, 205, 50), (255, 215, 0), (138, 43, 226))

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via Image Storage API")
    parser.add_argument("--api-id", required=True, help="LocalStack API Gateway ID")
    parser.add_argument("--api-key", default=None, help="Value for the x-api-key header")
    parser.add_argument("--images-dir", type=Path, default=None, help="Images to upload")
    parser.add_argument("--limit", type=int, default=4, help="Number of images to seed")
    parser.add_argument("--output", type=Path, default=DEFAULT_IDS_FILE, help="IDs file")
    return parser.parse_args()


def sample_images(images_dir: Path | None, limit: int) -> Iterator[tuple[str, bytes, str]]:
    """Yield ``(name, content, content_type)`` for each image to upload."""
    if images_dir is None:
        for index, color in enumerate(SWATCH_COLORS[:limit]):
            buffer = BytesIO()
            Image.new("RGB", (640, 480), color).save(buffer, format="PNG")
            yield f"swatch-{index}.png", buffer.getvalue(), "image/png"
        return

    paths = sorted(p for p in images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES)
    for path in paths[:limit]:
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        yield path.name, path.read_bytes(), content_type


def seed_images() -> None:
    args = parse_args()
    client = ImageApiClient.for_local_api(args.api_id, args.api_key)
    logger.info("Starting seeding process", extra={"api_base_url": client.base_url})

    seeded: list[str] = []

    try:
        for name, content, content_type in sample_images(args.images_dir, args.limit):
            response = client.upload(content, content_type)

            if response.status_code != 201:
                logger.error(
                    "Failed to seed image",
                    extra={"image": name, "status": response.status_code, "response": response.text},
                )
                continue

            image_id = response.json()["image_id"]
            seeded.append(image_id)
            logger.info("Seeded image", extra={"image": name, "image_id": image_id})

        if seeded:
            thumbnail = client.view(seeded[0], thumbnail=True)
            logger.info(
                "Thumbnail check",
                extra={
                    "status": thumbnail.status_code,
                    "content_type": thumbnail.headers.get("Content-Type"),
                    "size": len(thumbnail.content),
                },
            )

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)

    finally:
        # Record whatever was created so cleanup can still remove it
        args.output.write_text("".join(f"{image_id}\n" for image_id in seeded))

    logger.info("Seeding completed", extra={"seeded": len(seeded), "output": str(args.output)})


if __name__ == "__main__":
    seed_images()
