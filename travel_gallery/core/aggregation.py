"""
Per-country statistics derived from the image collection.
"""

import logging
from typing import Dict, List, Sequence

from .types import CountryRecord, Dataset, ImageRecord

logger = logging.getLogger(__name__)

COUNTRY_CODES: Dict[str, str] = {
    "Argentina": "AR",
    "Japan": "JP",
    "Colombia": "CO",
    "Peru": "PE",
    "Bolivia": "BO",
    "Chile": "CL",
    "Denmark": "DK",
}


def get_country_code(country_name: str) -> str:
    """
    Look up the short code for a country.

    Args:
        country_name: Country name as stored on the image

    Returns:
        Code from the known table, else the first two letters upper-cased
    """
    return COUNTRY_CODES.get(country_name, country_name[:2].upper())


def build_country_stats(images: Sequence[ImageRecord]) -> List[CountryRecord]:
    """
    Rebuild the country aggregates from scratch.

    Countries appear in the order their first image appears. The first
    featured image of a country becomes its representative.

    Args:
        images: Full image collection in insertion order

    Returns:
        One aggregate per distinct country
    """
    stats: Dict[str, CountryRecord] = {}

    for image in images:
        record = stats.get(image.country)
        if record is None:
            record = CountryRecord(
                name=image.country, code=get_country_code(image.country)
            )
            stats[image.country] = record

        record.image_count += 1
        if image.featured and record.featured_image is None:
            record.featured_image = image.id

    return list(stats.values())


def update_country_stats(dataset: Dataset) -> None:
    """Replace ``dataset.countries`` with a fresh rebuild."""
    dataset.countries = build_country_stats(dataset.images)
    logger.debug(f"Recomputed stats for {len(dataset.countries)} countries")
