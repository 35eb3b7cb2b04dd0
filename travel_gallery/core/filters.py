"""
Filtering used when listing images.
"""

from typing import Iterable, List, Optional, Union

from .types import ImageRecord


def parse_tag_list(tags: Union[str, Iterable[str], None]) -> List[str]:
    """
    Split a comma-separated tag string into clean tags.

    Args:
        tags: ``"a, b,c"`` style string, an iterable of tags, or None

    Returns:
        Stripped, non-empty tags in their original order
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [tag.strip() for tag in tags if tag and tag.strip()]


def filter_images(
    images: Iterable[ImageRecord],
    country: Optional[str] = None,
    featured: Optional[bool] = None,
    tags: Union[str, Iterable[str], None] = None,
) -> List[ImageRecord]:
    """
    Filter images the way the gallery listing does.

    Args:
        images: Images in display order
        country: Case-insensitive country name; ``"all"`` disables the filter
        featured: Only ``True`` filters, to featured images
        tags: Tags to match (comma string or list); an image matches if it
            carries any of them, compared case-insensitively

    Returns:
        Matching images, order preserved
    """
    result = list(images)

    if country and country.lower() != "all":
        wanted = country.lower()
        result = [img for img in result if img.country.lower() == wanted]

    if featured:
        result = [img for img in result if img.featured]

    tag_list = {tag.lower() for tag in parse_tag_list(tags)}
    if tag_list:
        result = [
            img for img in result if any(t.lower() in tag_list for t in img.tags)
        ]

    return result
