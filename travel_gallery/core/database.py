"""
Image metadata store.

Every mutating operation runs a full load, modify, aggregate, save cycle
against the JSON document, serialized by a per-store lock.
"""

import logging
import shutil
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from pydantic import BaseModel

from .aggregation import update_country_stats
from .exceptions import DatasetLoadError, ImageExistsError
from .filters import filter_images
from .storage import DEFAULT_CACHE_TIMEOUT, DatasetStorage
from .types import (
    CountryRecord,
    Dataset,
    ImageCreate,
    ImageRecord,
    ImageUpdate,
    normalize_image,
)
from .utils import (
    generate_image_id,
    is_image_file,
    next_timestamp,
    today_iso,
    utc_now,
)

logger = logging.getLogger(__name__)

# Upload staging directory inside the image root, never a country
UPLOAD_STAGING_DIR = "temp"

Record = TypeVar("Record", bound=BaseModel)


def _copies(records: Iterable[Record]) -> List[Record]:
    return [record.model_copy(deep=True) for record in records]


def copy_bundled_images(source_dir: Path, images_dir: Path) -> int:
    """
    Copy the images shipped with the app onto the persistent image disk.

    Top-level files and country directories are copied over whatever is
    already there; the upload staging directory is skipped.

    Args:
        source_dir: Bundled image root
        images_dir: Image root on the persistent disk

    Returns:
        Number of top-level entries copied
    """
    source_dir = Path(source_dir)
    images_dir = Path(images_dir)
    if not source_dir.is_dir():
        logger.warning(f"No bundled images at {source_dir}")
        return 0
    if source_dir.resolve() == images_dir.resolve():
        return 0

    copied = 0
    try:
        images_dir.mkdir(parents=True, exist_ok=True)
        for entry in sorted(source_dir.iterdir()):
            if entry.name == UPLOAD_STAGING_DIR:
                continue
            target = images_dir / entry.name
            if entry.is_dir():
                shutil.copytree(entry, target, dirs_exist_ok=True)
                logger.info(f"Copied directory {entry.name} to persistent disk")
            else:
                shutil.copy2(entry, target)
                logger.info(f"Copied {entry.name} to persistent disk")
            copied += 1
    except OSError as e:
        logger.error(f"Error copying bundled images to {images_dir}: {e}")

    return copied


class ImageDatabase:
    """
    Gallery metadata store backed by a single JSON file.

    Create one instance per process and share it. Reads are served from the
    storage cache; writes copy the loaded dataset, change the copy and only
    replace the cache once the copy is safely on disk.
    """

    def __init__(
        self,
        db_path: Path,
        template_path: Optional[Path] = None,
        cache_timeout: float = DEFAULT_CACHE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            db_path: Path to the JSON document
            template_path: Optional seed document for first start
            cache_timeout: Seconds a loaded dataset stays fresh
            clock: Monotonic time source, used for cache ageing
        """
        self.storage = DatasetStorage(
            db_path,
            template_path=template_path,
            cache_timeout=cache_timeout,
            clock=clock,
        )
        self._lock = threading.RLock()

    @property
    def db_path(self) -> Path:
        return self.storage.db_path

    def load(self) -> Dataset:
        """Copy of the current dataset (cached, or read from disk)."""
        with self._lock:
            return self.storage.load().model_copy(deep=True)

    def _current(self) -> Dataset:
        """The shared cached dataset. Callers must not mutate or return it."""
        with self._lock:
            return self.storage.load()

    def invalidate_cache(self) -> None:
        """Force the next read to hit disk."""
        with self._lock:
            self.storage.invalidate_cache()

    def _begin(self) -> Optional[Dataset]:
        """Private copy of the dataset to mutate, or None if unreadable."""
        try:
            return self.storage.load_strict().model_copy(deep=True)
        except DatasetLoadError as e:
            logger.error(f"Refusing to write over unreadable dataset: {e}")
            return None

    def _commit(self, dataset: Dataset) -> bool:
        update_country_stats(dataset)
        return self.storage.save(dataset)

    @staticmethod
    def _find_index(dataset: Dataset, image_id: str) -> Optional[int]:
        for index, image in enumerate(dataset.images):
            if image.id == image_id:
                return index
        return None

    # Queries return copies; edits to them never reach the store

    def get_all_images(self) -> List[ImageRecord]:
        """All images in insertion order."""
        return _copies(self._current().images)

    def get_image_by_id(self, image_id: str) -> Optional[ImageRecord]:
        """Get an image by id."""
        for image in self._current().images:
            if image.id == image_id:
                return image.model_copy(deep=True)
        return None

    def get_images_by_country(self, country: str) -> List[ImageRecord]:
        """Images whose country matches, ignoring case."""
        wanted = country.lower()
        images = self._current().images
        return _copies(img for img in images if img.country.lower() == wanted)

    def get_featured_images(self) -> List[ImageRecord]:
        """Images flagged as featured."""
        return _copies(img for img in self._current().images if img.featured)

    def get_all_countries(self) -> List[CountryRecord]:
        """Country aggregates as last computed."""
        return _copies(self._current().countries)

    def get_all_tags(self) -> List[str]:
        """Known tags."""
        return list(self._current().tags)

    def filter_images(
        self,
        country: Optional[str] = None,
        featured: Optional[bool] = None,
        tags: Union[str, Iterable[str], None] = None,
    ) -> List[ImageRecord]:
        """Images matching the listing filters, see ``filters.filter_images``."""
        return _copies(
            filter_images(
                self._current().images, country=country, featured=featured, tags=tags
            )
        )

    # Commands

    def add_image(
        self, image_data: Union[ImageCreate, Dict[str, Any]]
    ) -> Optional[ImageRecord]:
        """
        Add an image, filling in defaults for missing fields.

        Args:
            image_data: Creation input; ``id`` is generated when absent

        Returns:
            The stored record, or None if it could not be persisted

        Raises:
            ImageExistsError: If the given id is already taken
            pydantic.ValidationError: If required fields are missing
        """
        if isinstance(image_data, ImageCreate):
            payload = image_data
        else:
            payload = ImageCreate.model_validate(image_data)

        with self._lock:
            dataset = self._begin()
            if dataset is None:
                return None

            if payload.id and self._find_index(dataset, payload.id) is not None:
                raise ImageExistsError(payload.id)

            image = normalize_image(
                payload,
                image_id=generate_image_id(),
                timestamp=utc_now(),
                today=today_iso(),
            )
            dataset.images.append(image)

            if not self._commit(dataset):
                return None

        logger.info(f"Added image {image.id} ({image.country}/{image.filename})")
        return image.model_copy(deep=True)

    def update_image(
        self, image_id: str, patch: Union[ImageUpdate, Dict[str, Any]]
    ) -> Optional[ImageRecord]:
        """
        Merge changed fields into an existing image.

        Args:
            image_id: Image to update
            patch: Fields to overwrite; ``id`` and timestamps are not patchable

        Returns:
            The updated record, or None if the image does not exist or the
            change could not be persisted
        """
        if not isinstance(patch, ImageUpdate):
            patch = ImageUpdate.model_validate(patch)

        with self._lock:
            dataset = self._begin()
            if dataset is None:
                return None

            index = self._find_index(dataset, image_id)
            if index is None:
                return None

            current = dataset.images[index]
            changes = patch.changes()
            changes["updated_at"] = next_timestamp(current.updated_at)
            updated = current.model_copy(update=changes)
            dataset.images[index] = updated

            if not self._commit(dataset):
                return None

        logger.info(f"Updated image {image_id}: {sorted(patch.changes())}")
        return updated.model_copy(deep=True)

    def delete_image(self, image_id: str) -> bool:
        """
        Remove an image.

        Returns:
            False if the image does not exist (nothing is written), otherwise
            whether the save succeeded
        """
        with self._lock:
            dataset = self._begin()
            if dataset is None:
                return False

            index = self._find_index(dataset, image_id)
            if index is None:
                return False

            del dataset.images[index]
            saved = self._commit(dataset)

        if saved:
            logger.info(f"Deleted image {image_id}")
        return saved

    def add_tag(self, tag: str) -> str:
        """
        Register a tag. The dataset is only written if the tag is new.

        Returns:
            The tag, whether or not it was already known
        """
        with self._lock:
            dataset = self._begin()
            if dataset is None or tag in dataset.tags:
                return tag

            dataset.tags.append(tag)
            if self.storage.save(dataset):
                logger.info(f"Added tag {tag!r}")
        return tag

    # Filesystem

    def sync_with_filesystem(self, images_dir: Path) -> int:
        """
        Import images found on disk that the dataset does not know yet.

        Each sub-directory of ``images_dir`` is a country. A file is new when
        its name without extension is not an existing image id.

        Args:
            images_dir: Root image directory

        Returns:
            Number of images imported
        """
        images_dir = Path(images_dir)
        if not images_dir.is_dir():
            logger.warning(f"Image directory does not exist: {images_dir}")
            return 0

        with self._lock:
            known_ids = {image.id for image in self.get_all_images()}
            pending: List[ImageCreate] = []

            for country_dir in sorted(images_dir.iterdir()):
                if not country_dir.is_dir():
                    continue
                if country_dir.name == UPLOAD_STAGING_DIR:
                    continue
                if country_dir.name.startswith("."):
                    continue

                try:
                    for file_path in sorted(country_dir.iterdir()):
                        if not file_path.is_file() or not is_image_file(file_path):
                            continue
                        image_id = file_path.stem
                        if image_id in known_ids:
                            continue
                        known_ids.add(image_id)
                        pending.append(
                            ImageCreate(
                                id=image_id,
                                filename=file_path.name,
                                country=country_dir.name,
                            )
                        )
                except OSError as e:
                    logger.warning(f"Stopped scanning {country_dir}: {e}")

            imported = 0
            for payload in pending:
                if self.add_image(payload) is not None:
                    imported += 1

        logger.info(f"Synced {imported} new images from {images_dir}")
        return imported

    def reset(self, images_dir: Optional[Path] = None) -> bool:
        """
        Empty the dataset, and optionally the image directory.

        The upload staging directory, the dataset file and its seed template
        are kept when they live inside ``images_dir``.

        Args:
            images_dir: Image root to clear, if any

        Returns:
            Whether the empty dataset was saved
        """
        with self._lock:
            if images_dir is not None and Path(images_dir).is_dir():
                keep = {self.db_path.resolve(), self.db_path.parent.resolve()}
                if self.storage.template_path is not None:
                    keep.add(self.storage.template_path.resolve())
                for entry in Path(images_dir).iterdir():
                    if entry.name == UPLOAD_STAGING_DIR or entry.resolve() in keep:
                        continue
                    if entry.is_dir():
                        shutil.rmtree(entry)
                        logger.info(f"Removed directory: {entry.name}")
                    else:
                        entry.unlink()
                        logger.info(f"Removed file: {entry.name}")

            saved = self.storage.save(Dataset())

        if saved:
            logger.info("Dataset cleared and reset to empty state")
        return saved
