from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class GetImageRequest(BaseModel):
    """Validation model for get image request.

    The identifier is deliberately not validated here: blank and malformed
    identifiers must produce the same not-found response as missing images.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    image_id: StrictStr = Field(
        default="",
        description="Image ID to retrieve",
    )

    thumbnail: StrictBool = Field(
        default=False,
        description="Return the square thumbnail instead of the resized original",
    )
