"""Image Storage Service Package."""

__version__ = "1.0.0"
__author__ = "Bharat kumar"
__description__ = (
    "Image ingestion service with signature sniffing and a sandboxed local store"
)

__all__ = ["handlers", "core"]
