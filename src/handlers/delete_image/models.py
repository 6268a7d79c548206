"""Pydantic models for bulk image deletion request/response."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteImagesRequest(BaseModel):
    """Validation model for bulk delete request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_urls: list[str] = Field(
        default_factory=list,
        description="URLs of images to delete",
    )


class DeleteImagesResponse(BaseModel):
    """Response model for bulk image deletion."""

    deleted: bool = Field(..., description="Always true once the request is accepted")
    message: str = Field(..., description="Success message")
