"""
Lambda handler responsible for serving stored images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.utils.constants import THUMBNAIL_SUFFIX
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


def _is_true(value: Any) -> bool:
    return str(value).strip().lower() == "true"


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``GET /images/{image_id}?thumbnail=true|false``.

    Serves the resized original, or the square thumbnail when
    ``thumbnail=true``. A bad identifier, a traversal attempt and a missing
    file all produce the same 404.
    """
    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    logger.info(
        "Received image view request",
        extra={
            "image_id": repr(path_params.get("image_id")),
            "query_params": query_params,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        request = validate_request(
            GetImageRequest,
            {
                "image_id": path_params.get("image_id") or "",
                "thumbnail": _is_true(query_params.get("thumbnail", "false")),
            },
        )
    except ValidationError as exc:
        return ResponseBuilder.invalid_request(exc)

    service = GetService()
    content = service.read_image(request.image_id, thumbnail=request.thumbnail)

    if content is None:
        return ResponseBuilder.not_found()

    settings = service.settings
    suffix = THUMBNAIL_SUFFIX if request.thumbnail else ""
    filename = f"{request.image_id}{suffix}.{settings.output_format}"

    return ResponseBuilder.binary_response(
        content,
        content_type=settings.output_mime_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
