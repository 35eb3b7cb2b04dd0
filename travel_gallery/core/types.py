"""
Type definitions for the gallery metadata store.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Camera profile applied when an image arrives without its own settings
DEFAULT_CAMERA = "RICOH GR IIIX"
DEFAULT_FOCAL_LENGTH = "28mm"
DEFAULT_APERTURE = "f/2.8"
DEFAULT_SHUTTER_SPEED = "1/125s"
DEFAULT_ISO = "200"

FileSize = Union[int, float, str]


def _unique_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    return list(dict.fromkeys(tags))


class ImageRecord(BaseModel):
    """A single photo and its metadata as stored in the dataset."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    filename: str
    country: str
    location: str = ""
    date_taken: str = ""
    camera: str = DEFAULT_CAMERA
    focal_length: str = DEFAULT_FOCAL_LENGTH
    aperture: str = DEFAULT_APERTURE
    shutter_speed: str = DEFAULT_SHUTTER_SPEED
    iso: str = DEFAULT_ISO
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    description: str = ""
    file_size: Optional[FileSize] = Field(default=None, alias="fileSize")
    file_size_bytes: Optional[int] = Field(default=None, alias="fileSizeBytes")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _unique_tags(tags)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the on-disk / API representation."""
        return self.model_dump(mode="json", by_alias=True)


class CountryRecord(BaseModel):
    """Per-country statistics derived from the image collection."""

    name: str
    code: str
    image_count: int = 0
    featured_image: Optional[str] = None


class Dataset(BaseModel):
    """The full persisted document."""

    images: List[ImageRecord] = Field(default_factory=list)
    countries: List[CountryRecord] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the on-disk representation."""
        return self.model_dump(mode="json", by_alias=True)


class ImageCreate(BaseModel):
    """Input for creating an image. Missing fields fall back to defaults."""

    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, extra="ignore"
    )

    id: Optional[str] = None
    filename: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    location: Optional[str] = None
    date_taken: Optional[str] = None
    camera: Optional[str] = None
    focal_length: Optional[str] = None
    aperture: Optional[str] = None
    shutter_speed: Optional[str] = None
    iso: Optional[str] = None
    tags: Optional[List[str]] = None
    featured: Optional[bool] = None
    description: Optional[str] = None
    file_size: Optional[FileSize] = Field(default=None, alias="fileSize")
    file_size_bytes: Optional[int] = Field(default=None, alias="fileSizeBytes")

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _unique_tags(tags)


class ImageUpdate(BaseModel):
    """Partial update for an image. Only fields that are set are applied."""

    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, extra="ignore"
    )

    filename: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = None
    date_taken: Optional[str] = None
    camera: Optional[str] = None
    focal_length: Optional[str] = None
    aperture: Optional[str] = None
    shutter_speed: Optional[str] = None
    iso: Optional[str] = None
    tags: Optional[List[str]] = None
    featured: Optional[bool] = None
    description: Optional[str] = None
    file_size: Optional[FileSize] = Field(default=None, alias="fileSize")
    file_size_bytes: Optional[int] = Field(default=None, alias="fileSizeBytes")

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return _unique_tags(tags)

    def changes(self) -> Dict[str, Any]:
        """Fields to merge, keyed by attribute name.

        An explicit null only clears the optional size fields; for every
        other field it is ignored.
        """
        nullable = {"file_size", "file_size_bytes"}
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in nullable
        }


def normalize_image(
    payload: ImageCreate, image_id: str, timestamp: datetime, today: str
) -> ImageRecord:
    """
    Build a fully populated record from creation input.

    Empty strings count as missing, so ``location=""`` still falls back to
    the country.

    Args:
        payload: Validated creation input
        image_id: Id to assign when the payload carries none
        timestamp: Value for both ``created_at`` and ``updated_at``
        today: Default ``date_taken`` (``YYYY-MM-DD``)

    Returns:
        The record ready for insertion
    """
    return ImageRecord(
        id=payload.id or image_id,
        filename=payload.filename,
        country=payload.country,
        location=payload.location or payload.country,
        date_taken=payload.date_taken or today,
        camera=payload.camera or DEFAULT_CAMERA,
        focal_length=payload.focal_length or DEFAULT_FOCAL_LENGTH,
        aperture=payload.aperture or DEFAULT_APERTURE,
        shutter_speed=payload.shutter_speed or DEFAULT_SHUTTER_SPEED,
        iso=payload.iso or DEFAULT_ISO,
        tags=payload.tags or [],
        featured=bool(payload.featured),
        description=payload.description or "",
        file_size=payload.file_size,
        file_size_bytes=payload.file_size_bytes,
        created_at=timestamp,
        updated_at=timestamp,
    )
