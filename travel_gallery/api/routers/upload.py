"""Image upload endpoints."""

import logging
import shutil
import threading
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from PIL import Image, UnidentifiedImageError

from ...config import Settings
from ...core.aggregation import COUNTRY_CODES
from ...core.database import UPLOAD_STAGING_DIR, ImageDatabase
from ...core.exceptions import ImageExistsError
from ...core.filters import parse_tag_list
from ...core.types import ImageCreate
from ...core.utils import format_bytes
from ..dependencies import get_database, get_settings
from ..schemas import UploadResponse, image_src

logger = logging.getLogger(__name__)

router = APIRouter()

# Guards the exists check and the move into a country directory
_placement_lock = threading.Lock()

UPLOAD_FORM = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Upload Image</title>
</head>
<body>
    <a href="/">Back to Gallery</a>
    <h1>Upload Image</h1>
    <form action="/api/upload" method="post" enctype="multipart/form-data">
        <label>Image File * <input type="file" name="image" accept="image/*" required></label>
        <label>Country *
            <select name="country" required>
                <option value="">Select Country</option>
{options}
            </select>
        </label>
        <label>Location * <input type="text" name="location" required></label>
        <label>Description <textarea name="description" rows="3"></textarea></label>
        <label>Tags (comma-separated) <input type="text" name="tags"></label>
        <button type="submit">Upload Image</button>
    </form>
</body>
</html>
"""


def _is_valid_image(path: Path) -> bool:
    """Check that Pillow can identify the file as an image."""
    try:
        with Image.open(path) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected upload {path.name}: {e}")
        return False


@router.get("", response_class=HTMLResponse)
def upload_form():
    """Minimal upload form."""
    options = "\n".join(
        f'                <option value="{name}">{name}</option>'
        for name in COUNTRY_CODES
    )
    return HTMLResponse(content=UPLOAD_FORM.format(options=options))


@router.post("", response_model=UploadResponse, status_code=201)
def upload_image(
    image: UploadFile = File(...),
    country: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    tags: str = Form(""),
    db: ImageDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """
    Store an uploaded image under its country and record its metadata.

    The image id is the file name without extension.
    """
    filename = Path(image.filename or "").name
    if not filename:
        raise HTTPException(status_code=400, detail="No image file provided")

    if not location.strip():
        raise HTTPException(status_code=400, detail="Location is required")

    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    country = country.strip() or "Unknown"
    if Path(country).name != country or country in (".", ".."):
        raise HTTPException(status_code=400, detail="Invalid country")

    image_id = Path(filename).stem
    if db.get_image_by_id(image_id):
        raise HTTPException(status_code=409, detail=f"Image already exists: {image_id}")

    images_dir = settings.resolved_images_dir
    staging_dir = images_dir / UPLOAD_STAGING_DIR
    country_dir = images_dir / country
    final_path = country_dir / filename

    try:
        staging_dir.mkdir(parents=True, exist_ok=True)
        # One staging file per request
        temp_path = staging_dir / f"{uuid.uuid4().hex}{Path(filename).suffix}"
        with temp_path.open("wb") as buffer:
            shutil.copyfileobj(image.file, buffer)
    except OSError as e:
        logger.error(f"Error uploading image {filename}: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload image")
    finally:
        image.file.close()

    if not _is_valid_image(temp_path):
        temp_path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    # Past this block final_path is this request's own file
    with _placement_lock:
        if final_path.exists():
            temp_path.unlink(missing_ok=True)
            raise HTTPException(
                status_code=409, detail=f"File already exists: {filename}"
            )
        try:
            country_dir.mkdir(parents=True, exist_ok=True)
            temp_path.replace(final_path)
        except OSError as e:
            logger.error(f"Error moving upload {filename} into {country_dir}: {e}")
            temp_path.unlink(missing_ok=True)
            raise HTTPException(status_code=500, detail="Failed to upload image")

    size_bytes = final_path.stat().st_size
    payload = ImageCreate(
        id=image_id,
        filename=filename,
        country=country,
        location=location.strip(),
        description=description,
        tags=parse_tag_list(tags),
        featured=False,
        file_size=format_bytes(size_bytes),
        file_size_bytes=size_bytes,
    )

    try:
        record = db.add_image(payload)
    except ImageExistsError as e:
        final_path.unlink(missing_ok=True)
        raise HTTPException(status_code=409, detail=str(e))

    if not record:
        # Keep disk and dataset consistent
        final_path.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail="Failed to save image metadata")

    logger.info(f"Uploaded {filename} to {country_dir}")
    return UploadResponse(**record.model_dump(), src=image_src(record))
