"""
Exception-to-response boundary for API Gateway Lambda handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any, NamedTuple

from aws_lambda_powertools import Logger

from core.models.errors import ImageServiceError
from core.utils.response import JsonDict, ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

LambdaHandler = Callable[[Any, Any], JsonDict]


class FailureResponse(NamedTuple):
    status: HTTPStatus
    message: str | None  # None: derive a message from the exception
    log_level: str


# First matching entry wins, so subclasses precede their bases
# (PermissionError and TimeoutError are both OSError).
FAILURE_RESPONSES: tuple[tuple[type[BaseException] | tuple[type[BaseException], ...], FailureResponse], ...] = (
    (
        (ValueError, KeyError, TypeError, AttributeError),
        FailureResponse(HTTPStatus.BAD_REQUEST, None, "warning"),
    ),
    (
        PermissionError,
        FailureResponse(
            HTTPStatus.FORBIDDEN,
            "You don't have permission to perform this action.",
            "warning",
        ),
    ),
    (
        MemoryError,
        FailureResponse(
            HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
            "The file is too large to process.",
            "warning",
        ),
    ),
    (
        TimeoutError,
        FailureResponse(
            HTTPStatus.GATEWAY_TIMEOUT,
            "The request took too long to process. Please try again.",
            "exception",
        ),
    ),
    (
        OSError,
        FailureResponse(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "Image storage is temporarily unavailable. Please try again later.",
            "exception",
        ),
    ),
)

UNEXPECTED_FAILURE = FailureResponse(
    HTTPStatus.INTERNAL_SERVER_ERROR,
    "We're experiencing technical difficulties. Please try again in a few moments.",
    "exception",
)

_FRIENDLY_PREFIXES = ("Invalid", "Missing", "Required", "Must", "Cannot", "Unable to", "Image", "File")


def describe_client_error(exc: Exception) -> str:
    """Message for a 400: keep messages already written for users, hide the rest."""
    text = str(exc)
    if text.startswith(_FRIENDLY_PREFIXES):
        return text

    if isinstance(exc, UnicodeError):
        return "The request contains invalid characters or encoding."
    if isinstance(exc, (KeyError, AttributeError)):
        return "A required field is missing. Please ensure all required fields are provided."
    if isinstance(exc, TypeError):
        return "The data format is incorrect. Please check the request format."

    return "The provided data is invalid. Please check your input and try again."


def classify_failure(exc: Exception) -> FailureResponse:
    for exc_types, failure in FAILURE_RESPONSES:
        if isinstance(exc, exc_types):
            return failure
    return UNEXPECTED_FAILURE


def api_gateway_handler(func: LambdaHandler) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight requests without calling the handler, and turns
    anything the handler raises into an error response:
    - ImageServiceError: by error kind (see ResponseBuilder.from_image_error)
    - Other exceptions: by the first matching FAILURE_RESPONSES entry,
      500 otherwise

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"status": "ok"})
    """

    @wraps(func)
    def wrapper(event: Any, context: Any, *, cors_origin: str | None = None) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.preflight(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)
        log_extra: dict[str, Any] = {"handler": func.__name__, "request_id": request_id}

        try:
            return func(event, context)

        except ImageServiceError as exc:
            logger.warning(
                "Image service error in handler",
                extra={**log_extra, "kind": exc.kind.value, "error_code": exc.error_code},
            )
            return ResponseBuilder.from_image_error(
                exc, request_id=request_id, cors_origin=cors_origin
            )

        except Exception as exc:
            failure = classify_failure(exc)
            log_extra.update(error=str(exc), error_type=type(exc).__name__)

            if failure.log_level == "exception":
                logger.exception("Handler failed", extra=log_extra)
            else:
                logger.warning("Handler rejected request", extra=log_extra, exc_info=True)

            return ResponseBuilder.error(
                failure.status,
                failure.message or describe_client_error(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
