"""Storage identifier generation."""

import uuid


def generate_image_id() -> str:
    """Generate a random, opaque storage identifier (canonical UUID-v4 text)."""
    return str(uuid.uuid4())
