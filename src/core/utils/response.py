"""
API Gateway proxy responses for the image endpoints.

JSON responses always carry the CORS headers; binary image responses carry
them only when an explicit origin is requested. Failures raised by the
storage core are translated by ``ResponseBuilder.from_image_error`` so every
handler reports an error kind the same way.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from pydantic import ValidationError

from core.models.errors import ErrorKind, ImageServiceError
from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from core.utils.validators import sanitize_validation_errors

JsonDict = dict[str, Any]

NOT_FOUND_MESSAGE = "Image not found"

# Kinds the caller can act on; the rest are infrastructure problems
_CLIENT_ERROR_KINDS = frozenset({ErrorKind.VALIDATION_FAILED, ErrorKind.PROCESSING_FAILED})


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    CORS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @classmethod
    def _cors_headers(cls, cors_origin: str | None) -> dict[str, str]:
        headers = dict(cls.CORS)
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin
        return headers

    @classmethod
    def json(
        cls,
        status: HTTPStatus,
        body: JsonDict | None = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload: JsonDict = dict(body or {})
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": {"Content-Type": DEFAULT_CONTENT_TYPE, **cls._cors_headers(cors_origin)},
            "body": json.dumps(payload),
        }

    @classmethod
    def ok(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.json(HTTPStatus.OK, body, **kwargs)

    @classmethod
    def created(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.json(HTTPStatus.CREATED, body, **kwargs)

    @classmethod
    def preflight(cls, *, cors_origin: str | None = None) -> JsonDict:
        """204 response for CORS preflight (OPTIONS) requests."""
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": {"Content-Type": DEFAULT_CONTENT_TYPE, **cls._cors_headers(cors_origin)},
            "body": "",
        }

    @classmethod
    def error(
        cls,
        status: HTTPStatus,
        message: str,
        *,
        error: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Error body: ``{"error", "message", "timestamp", ["details"]}``.

        ``error`` defaults to the HTTP status name (e.g. ``NOT_FOUND``).
        """
        payload: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            payload["details"] = details

        return cls.json(status, payload, request_id=request_id, cors_origin=cors_origin)

    @classmethod
    def bad_request(cls, message: str, **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.BAD_REQUEST, message, **kwargs)

    @classmethod
    def invalid_request(cls, exc: ValidationError, **kwargs: Any) -> JsonDict:
        """400 for a request body or parameters rejected by a pydantic model."""
        return cls.bad_request(
            "Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
            **kwargs,
        )

    @classmethod
    def validation_error(
        cls,
        message: str,
        *,
        error: str = ERROR_CODE_VALIDATION_FAILED,
        **kwargs: Any,
    ) -> JsonDict:
        """422 Unprocessable Entity carrying a specific error code."""
        return cls.error(HTTPStatus.UNPROCESSABLE_ENTITY, message, error=error, **kwargs)

    @classmethod
    def not_found(cls, message: str = NOT_FOUND_MESSAGE, **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.NOT_FOUND, message, **kwargs)

    @classmethod
    def internal_error(cls, message: str = "Internal server error", **kwargs: Any) -> JsonDict:
        return cls.error(HTTPStatus.INTERNAL_SERVER_ERROR, message, **kwargs)

    @classmethod
    def from_image_error(cls, exc: ImageServiceError, **kwargs: Any) -> JsonDict:
        """Translate a storage failure into its HTTP response.

        VALIDATION_FAILED and PROCESSING_FAILED -> 422 with the error code
        PATH_TRAVERSAL_REJECTED -> the same 404 as a missing image
        IO_FAILED -> 500
        """
        if exc.kind in _CLIENT_ERROR_KINDS:
            return cls.validation_error(exc.message, error=exc.error_code, **kwargs)

        if exc.kind is ErrorKind.PATH_TRAVERSAL_REJECTED:
            return cls.not_found(**kwargs)

        return cls.internal_error(exc.message, **kwargs)

    @classmethod
    def binary_response(
        cls,
        content: bytes,
        *,
        content_type: str,
        headers: dict[str, str] | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """200 with a base64 body that API Gateway decodes back to bytes."""
        response_headers: dict[str, str] = {
            "Content-Type": content_type,
            "Content-Length": str(len(content)),
            "Access-Control-Expose-Headers": EXPOSE_HEADERS,
        }
        if cors_origin:
            response_headers.update(cls._cors_headers(cors_origin))
        response_headers.update(headers or {})

        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": response_headers,
            "body": base64.b64encode(content).decode("ascii"),
            "isBase64Encoded": True,
        }
