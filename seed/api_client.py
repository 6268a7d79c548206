"""Small HTTP client for the Image Storage API, shared by the seed scripts."""

import base64
from typing import Any

import requests

LOCAL_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1/images"

REQUEST_TIMEOUT = 30


class ImageApiClient:
    """Wrapper around the upload, view and bulk-delete endpoints."""

    def __init__(self, base_url: str, api_key: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        if api_key:
            self.session.headers["x-api-key"] = api_key

    @classmethod
    def for_local_api(cls, api_id: str, api_key: str | None = None) -> "ImageApiClient":
        return cls(LOCAL_API_URL.format(api_id), api_key)

    def view_url(self, image_id: str) -> str:
        return f"{self.base_url}/{image_id}"

    def upload(self, content: bytes, content_type: str) -> requests.Response:
        payload: dict[str, Any] = {
            "file": base64.b64encode(content).decode("ascii"),
            "content_type": content_type,
            "file_size": len(content),
        }
        return self.session.post(self.base_url, json=payload, timeout=REQUEST_TIMEOUT)

    def view(self, image_id: str, *, thumbnail: bool = False) -> requests.Response:
        return self.session.get(
            self.view_url(image_id),
            params={"thumbnail": str(thumbnail).lower()},
            timeout=REQUEST_TIMEOUT,
        )

    def delete(self, image_ids: list[str]) -> requests.Response:
        """Bulk delete; the endpoint takes view URLs, not bare IDs."""
        return self.session.post(
            f"{self.base_url}/delete",
            json={"image_urls": [self.view_url(image_id) for image_id in image_ids]},
            timeout=REQUEST_TIMEOUT,
        )
