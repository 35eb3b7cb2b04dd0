"""Photo listing and metadata endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from ...core.database import ImageDatabase
from ...core.exceptions import ImageExistsError
from ...core.types import ImageCreate, ImageUpdate
from ..dependencies import get_database
from ..schemas import MessageResponse, PhotoResponse, photo_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[PhotoResponse])
def list_photos(
    country: Optional[str] = None,
    featured: Optional[bool] = None,
    tags: Optional[str] = None,
    db: ImageDatabase = Depends(get_database),
):
    """
    List photos with optional filtering.

    - country: Case-insensitive country name, ``all`` for every country
    - featured: ``true`` to only return featured photos
    - tags: Comma-separated tags, a photo matches if it has any of them
    """
    images = db.filter_images(country=country, featured=featured, tags=tags)
    return [photo_response(image) for image in images]


@router.get("/{image_id}", response_model=PhotoResponse)
def get_photo(image_id: str, db: ImageDatabase = Depends(get_database)):
    """Get a photo by id."""
    image = db.get_image_by_id(image_id)
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")
    return photo_response(image)


@router.post("", response_model=PhotoResponse, status_code=201)
def create_photo(payload: ImageCreate, db: ImageDatabase = Depends(get_database)):
    """Add photo metadata for a file that is already in place."""
    try:
        image = db.add_image(payload)
    except ImageExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not image:
        raise HTTPException(status_code=400, detail="Failed to add image")
    return photo_response(image)


@router.put("/{image_id}", response_model=PhotoResponse)
def update_photo(
    image_id: str, patch: ImageUpdate, db: ImageDatabase = Depends(get_database)
):
    """Update fields of an existing photo."""
    image = db.update_image(image_id, patch)
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")
    return photo_response(image)


@router.delete("/{image_id}", response_model=MessageResponse)
def delete_photo(image_id: str, db: ImageDatabase = Depends(get_database)):
    """Delete a photo's metadata. The file on disk is left alone."""
    if not db.delete_image(image_id):
        raise HTTPException(status_code=404, detail="Image not found")
    return MessageResponse(message="Image deleted successfully")
