"""
JSON file storage for the gallery dataset.

Reads and writes the whole dataset as one document and keeps a time-boxed
in-memory copy so that bursts of requests do not re-read the file.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from .exceptions import DatasetLoadError
from .types import Dataset

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TIMEOUT = 30.0


class DatasetStorage:
    """
    Owns the backing JSON file and its cache.

    The cache holds the last dataset read from or written to disk. It is
    served as-is until it is older than ``cache_timeout`` seconds.
    """

    def __init__(
        self,
        db_path: Path,
        template_path: Optional[Path] = None,
        cache_timeout: float = DEFAULT_CACHE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize storage.

        Args:
            db_path: Path to the JSON document
            template_path: Seed document copied when ``db_path`` is missing
            cache_timeout: Seconds a loaded dataset stays fresh
            clock: Monotonic time source in seconds
        """
        self.db_path = Path(db_path)
        self.template_path = Path(template_path) if template_path else None
        self.cache_timeout = cache_timeout
        self._clock = clock

        self._cache: Optional[Dataset] = None
        self._cache_time: float = 0.0

    def invalidate_cache(self) -> None:
        """Force the next load to read from disk."""
        self._cache = None
        self._cache_time = 0.0
        logger.debug("Dataset cache cleared")

    def _cache_is_fresh(self, now: float) -> bool:
        if self._cache is None:
            return False
        return (now - self._cache_time) < self.cache_timeout

    def load(self) -> Dataset:
        """
        Load the dataset, from cache when fresh.

        A missing file is created from the template (or an empty skeleton).
        A corrupt file is left alone and an empty dataset is returned for
        this call only.

        Returns:
            The current dataset
        """
        try:
            return self.load_strict()
        except DatasetLoadError as e:
            logger.error(str(e))
            return Dataset()

    def load_strict(self) -> Dataset:
        """
        Load the dataset like ``load`` but fail on an unreadable file.

        Used before writing, so that a corrupt document is never replaced by
        a dataset built on top of the empty fallback.

        Returns:
            The current dataset

        Raises:
            DatasetLoadError: If the backing file cannot be read or parsed
        """
        now = self._clock()
        if self._cache_is_fresh(now):
            return self._cache

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatasetLoadError(f"Cannot create {self.db_path.parent}: {e}") from e

        if not self.db_path.exists():
            logger.info(f"Dataset not found, creating {self.db_path}")
            dataset = self._seed()
            self.save(dataset)
            return dataset

        try:
            with open(self.db_path, "r", encoding="utf-8") as f:
                dataset = Dataset.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            raise DatasetLoadError(
                f"Error loading dataset from {self.db_path}: {e}"
            ) from e

        self._cache = dataset
        self._cache_time = now
        logger.info(f"Loaded dataset with {len(dataset.images)} images")
        return dataset

    def _seed(self) -> Dataset:
        """
        Build the initial dataset from the template, if there is one.

        Raises:
            DatasetLoadError: If the template exists but cannot be parsed
        """
        if self.template_path is None or not self.template_path.exists():
            logger.info("No template found, starting with an empty dataset")
            return Dataset()

        try:
            with open(self.template_path, "r", encoding="utf-8") as f:
                dataset = Dataset.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            raise DatasetLoadError(
                f"Error reading template {self.template_path}: {e}"
            ) from e

        logger.info(f"Dataset created from template {self.template_path}")
        return dataset

    def save(self, dataset: Dataset) -> bool:
        """
        Write the whole dataset to disk.

        Writes to a temp file first, then renames it over the backing file,
        so a failed write leaves the previous document intact.

        Args:
            dataset: Dataset to persist

        Returns:
            True on success, False if the write failed
        """
        temp_file = self.db_path.with_suffix(self.db_path.suffix + ".tmp")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(dataset.to_dict(), indent=2)
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(payload)

            temp_file.replace(self.db_path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving dataset to {self.db_path}: {e}")
            try:
                temp_file.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning(f"Could not remove {temp_file}: {cleanup_error}")
            return False

        self._cache = dataset
        self._cache_time = self._clock()
        logger.info(f"Saved dataset with {len(dataset.images)} images")
        return True
