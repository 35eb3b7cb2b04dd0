"""Errors raised by the gallery store."""


class GalleryError(Exception):
    """Base class for gallery store errors."""


class DatasetLoadError(GalleryError):
    """The backing file exists but could not be read or parsed."""


class ImageExistsError(GalleryError):
    """An image with the requested id is already in the dataset."""

    def __init__(self, image_id: str):
        super().__init__(f"Image already exists: {image_id}")
        self.image_id = image_id
