"""
Lambda handler responsible for bulk image deletion.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import load_json_body, validate_request

from .models import DeleteImagesRequest, DeleteImagesResponse
from .service import DeleteService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle ``POST /images/delete`` with body ``{"image_urls": [...]}``.

    Deletion is best-effort: once the body is valid the response is always
    200, and per-image failures only show up in the logs.
    """
    body = load_json_body(event)
    if body is None:
        logger.warning("Invalid JSON body received")
        return ResponseBuilder.bad_request("Invalid JSON body")

    try:
        request = validate_request(DeleteImagesRequest, body)
    except ValidationError as exc:
        logger.warning(
            "Delete request validation failed",
            extra={"errors": exc.errors(include_url=False, include_input=False)},
        )
        return ResponseBuilder.invalid_request(exc)

    logger.info(
        "Received image delete request",
        extra={
            "count": len(request.image_urls),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    DeleteService().delete_images(request.image_urls)

    response = DeleteImagesResponse(deleted=True, message="Images deleted successfully")
    return ResponseBuilder.ok(response.model_dump())
