"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, Field

from ..core.types import ImageRecord

IMAGES_URL_PREFIX = "/images"


class PhotoResponse(ImageRecord):
    """An image record plus the URL it is served from."""

    src: str


class UploadResponse(PhotoResponse):
    """Result of a successful upload."""

    message: str = "Image uploaded successfully"


class MessageResponse(BaseModel):
    message: str


class SyncResponse(BaseModel):
    message: str
    new_images: int


class TagCreate(BaseModel):
    """Schema for registering a tag."""

    tag: str = Field(..., min_length=1, max_length=100)


class TagResponse(BaseModel):
    tag: str


def image_src(image: ImageRecord) -> str:
    """URL path of an image below the image root."""
    return f"{IMAGES_URL_PREFIX}/{image.country}/{image.filename}"


def photo_response(image: ImageRecord) -> PhotoResponse:
    """Attach the derived ``src`` to a record."""
    return PhotoResponse(**image.model_dump(), src=image_src(image))
