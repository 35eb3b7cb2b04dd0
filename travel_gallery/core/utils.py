"""
Utility functions for gallery operations.
"""

import random
import string
import time
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

# Extensions picked up when syncing with the image directory
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif"}

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_image_id() -> str:
    """
    Generate a new image id.

    Returns:
        Id of the form ``IMG_<epoch-ms>_<9 base36 chars>``
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"IMG_{int(time.time() * 1000)}_{suffix}"


def is_image_file(file_path: Path) -> bool:
    """
    Check if a file is a gallery image based on extension.

    Args:
        file_path: Path to check

    Returns:
        True if image file, False otherwise
    """
    return file_path.suffix.lower() in IMAGE_EXTENSIONS


def format_bytes(size_bytes: int) -> str:
    """
    Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "2.50 MB")
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.2f} {units[unit_index]}"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def today_iso() -> str:
    """Today's date as ``YYYY-MM-DD``."""
    return date.today().isoformat()


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """
    Return a timestamp strictly later than ``previous``.

    Args:
        previous: Last recorded timestamp, if any

    Returns:
        Current UTC time, nudged forward by one microsecond when the clock
        has not moved past ``previous``
    """
    now = utc_now()
    if previous is not None and previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
