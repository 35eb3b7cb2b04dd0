"""Gallery metadata store."""

from .database import ImageDatabase
from .exceptions import DatasetLoadError, GalleryError, ImageExistsError
from .types import CountryRecord, Dataset, ImageCreate, ImageRecord, ImageUpdate

__all__ = [
    "ImageDatabase",
    "GalleryError",
    "DatasetLoadError",
    "ImageExistsError",
    "CountryRecord",
    "Dataset",
    "ImageCreate",
    "ImageRecord",
    "ImageUpdate",
]
