"""Countries, tags and filesystem sync endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ...config import Settings
from ...core.database import ImageDatabase
from ...core.types import CountryRecord
from ..dependencies import get_database, get_settings
from ..schemas import SyncResponse, TagCreate, TagResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/countries", response_model=List[CountryRecord])
def list_countries(db: ImageDatabase = Depends(get_database)):
    """Per-country image counts and representative images."""
    return db.get_all_countries()


@router.get("/tags", response_model=List[str])
def list_tags(db: ImageDatabase = Depends(get_database)):
    """All known tags."""
    return db.get_all_tags()


@router.post("/tags", response_model=TagResponse, status_code=201)
def create_tag(payload: TagCreate, db: ImageDatabase = Depends(get_database)):
    """Register a tag. Registering a known tag is a no-op."""
    tag = payload.tag.strip()
    if not tag:
        raise HTTPException(status_code=400, detail="Tag must not be blank")
    return TagResponse(tag=db.add_tag(tag))


@router.post("/sync", response_model=SyncResponse)
def sync_images(
    db: ImageDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """Import images found in the image directory that are not catalogued."""
    try:
        new_count = db.sync_with_filesystem(settings.resolved_images_dir)
    except OSError as e:
        logger.error(f"Error syncing database: {e}")
        raise HTTPException(status_code=500, detail="Failed to sync database")

    return SyncResponse(message=f"Synced {new_count} new images", new_images=new_count)
