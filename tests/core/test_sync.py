"""
Tests for importing images found on disk.
"""

from pathlib import Path
from typing import Callable
from unittest.mock import patch

from travel_gallery.core.database import ImageDatabase


class TestSyncWithFilesystem:
    """Tests for ImageDatabase.sync_with_filesystem."""

    def test_imports_new_images(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        """Test each country directory's images are imported with defaults."""
        make_image(images_dir / "Japan" / "tokyo.jpg")
        make_image(images_dir / "Japan" / "kyoto.png", fmt="PNG")
        make_image(images_dir / "Peru" / "cusco.jpeg")

        imported = database.sync_with_filesystem(images_dir)

        assert imported == 3
        tokyo = database.get_image_by_id("tokyo")
        assert tokyo.filename == "tokyo.jpg"
        assert tokyo.country == "Japan"
        assert tokyo.location == "Japan"
        assert database.get_image_by_id("kyoto").filename == "kyoto.png"
        assert [c.name for c in database.get_all_countries()] == ["Japan", "Peru"]

    def test_sync_is_idempotent(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        """Test a second run over an unchanged tree imports nothing."""
        make_image(images_dir / "Chile" / "a.jpg")

        assert database.sync_with_filesystem(images_dir) == 1
        assert database.sync_with_filesystem(images_dir) == 0
        assert len(database.get_all_images()) == 1

    def test_ignores_non_images_and_loose_files(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        """Test only image files inside country directories count."""
        make_image(images_dir / "loose.jpg")
        (images_dir / "Chile").mkdir()
        (images_dir / "Chile" / "notes.txt").write_text("hello")
        make_image(images_dir / "Chile" / "photo.JPG")

        assert database.sync_with_filesystem(images_dir) == 1
        assert [img.id for img in database.get_all_images()] == ["photo"]

    def test_skips_staging_and_hidden_directories(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        make_image(images_dir / "temp" / "upload.jpg")
        make_image(images_dir / ".trash" / "old.jpg")

        assert database.sync_with_filesystem(images_dir) == 0
        assert database.get_all_images() == []

    def test_same_stem_in_two_countries_imported_once(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        """Test ids stay unique across country directories."""
        make_image(images_dir / "Denmark" / "harbor.jpg")
        make_image(images_dir / "Japan" / "harbor.jpg")

        assert database.sync_with_filesystem(images_dir) == 1
        assert database.get_image_by_id("harbor").country == "Denmark"

    def test_existing_ids_are_not_reimported(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        database.add_image({"id": "known", "filename": "known.jpg", "country": "Peru"})
        make_image(images_dir / "Peru" / "known.jpg")

        assert database.sync_with_filesystem(images_dir) == 0

    def test_missing_directory_returns_zero(
        self, database: ImageDatabase, tmp_path: Path
    ) -> None:
        assert database.sync_with_filesystem(tmp_path / "missing") == 0

    def test_counts_only_persisted_imports(
        self, database: ImageDatabase, images_dir: Path, make_image: Callable
    ) -> None:
        """Test failed saves are not reported as imported."""
        make_image(images_dir / "Peru" / "a.jpg")

        with patch.object(database.storage, "save", return_value=False):
            assert database.sync_with_filesystem(images_dir) == 0
