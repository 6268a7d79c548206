import base64
import json
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="image-storage-test",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:image-storage-test",
    )


@pytest.fixture
def upload_image_event(sample_png_bytes) -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/images",
        "body": json.dumps(
            {
                "file": base64.b64encode(sample_png_bytes).decode("utf-8"),
                "content_type": "image/png",
                "file_size": len(sample_png_bytes),
            }
        ),
        "headers": {
            "Content-Type": "application/json",
            "x-api-key": "test-api-key",
        },
    }


@pytest.fixture
def get_image_event() -> dict[str, Any]:
    return {
        "httpMethod": "GET",
        "pathParameters": {"image_id": "3f2b8c1e-0000-4000-8000-000000000000"},
        "queryStringParameters": {"thumbnail": "false"},
        "headers": {"x-api-key": "test-api-key"},
    }


@pytest.fixture
def delete_images_event() -> dict[str, Any]:
    return {
        "httpMethod": "POST",
        "path": "/images/delete",
        "body": json.dumps(
            {"image_urls": ["https://cdn.example.com/images/view/abc?thumbnail=true"]}
        ),
        "headers": {"x-api-key": "test-api-key"},
    }
