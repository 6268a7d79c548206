"""
Lambda handler responsible for image upload.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.models.errors import ImageServiceError
from core.models.image import UploadCandidate
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import load_json_body, validate_request

from .models import ImageUploadRequest, ImageUploadResponse
from .service import UploadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    Expected body:
    {
        "file": "<base64>",
        "content_type": "image/png",
        "file_size": 12345
    }

    Returns 201 with the new image ID. Rejected images (bad size, type or
    signature, undecodable content) are 422 with a specific error code;
    storage failures are 500.
    """
    logger.info(
        "Received image upload request",
        extra={
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    body = load_json_body(event)
    if body is None:
        return ResponseBuilder.bad_request("Invalid JSON body")

    try:
        request = validate_request(ImageUploadRequest, body)
    except ValidationError as exc:
        logger.warning(
            "Upload request validation failed",
            extra={"errors": exc.errors(include_url=False, include_input=False)},
        )
        return ResponseBuilder.invalid_request(exc)

    try:
        candidate = UploadCandidate(
            data=UploadService.decode_file(request.file),
            content_type=request.content_type,
            declared_size=request.file_size,
        )
        image_id = UploadService().store_image(candidate)
    except ImageServiceError as exc:
        logger.warning(
            "Image upload failed",
            extra={"kind": exc.kind.value, "error_code": exc.error_code},
        )
        return ResponseBuilder.from_image_error(exc)

    response = ImageUploadResponse(image_id=image_id, message="Image uploaded successfully")
    return ResponseBuilder.created(response.model_dump())
