"""
Tests for the travel-gallery CLI.
"""

import json
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from travel_gallery.cli.main import cli
from travel_gallery.config import Settings
from travel_gallery.core.database import ImageDatabase
from travel_gallery.version import __version__


@pytest.fixture
def settings(db_path: Path, images_dir: Path) -> Settings:
    return Settings(database_path=db_path, images_dir=images_dir, render=False)


def invoke(settings: Settings, args, **kwargs):
    runner = CliRunner()
    return runner.invoke(cli, args, obj={"settings": settings}, **kwargs)


class TestServeCommand:
    """Tests for the serve command."""

    @patch("travel_gallery.cli.main.uvicorn.run")
    def test_serve_defaults(self, mock_run: MagicMock, settings: Settings) -> None:
        """Test the server starts with host and port from settings."""
        result = invoke(settings, ["serve"])

        assert result.exit_code == 0
        assert "Travel Gallery" in result.output
        assert f"v{__version__}" in result.output
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args[0] == "travel_gallery.api.app:create_app"
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 3000
        assert kwargs["reload"] is False

    @patch("travel_gallery.cli.main.uvicorn.run")
    def test_serve_custom_host_port(
        self, mock_run: MagicMock, settings: Settings
    ) -> None:
        result = invoke(
            settings, ["serve", "--host", "0.0.0.0", "--port", "8080", "--reload"]
        )

        assert result.exit_code == 0
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8080
        assert kwargs["reload"] is True


class TestSyncCommand:
    """Tests for the sync command."""

    def test_sync(
        self, settings: Settings, images_dir: Path, make_image: Callable
    ) -> None:
        make_image(images_dir / "Argentina" / "salta.jpg")

        result = invoke(settings, ["sync"])

        assert result.exit_code == 0
        assert "Synced 1 new images" in result.output
        saved = json.loads(settings.resolved_database_path.read_text())
        assert [img["id"] for img in saved["images"]] == ["salta"]

    def test_sync_custom_directory(
        self, settings: Settings, tmp_path: Path, make_image: Callable
    ) -> None:
        other = tmp_path / "elsewhere"
        make_image(other / "Chile" / "a.jpg")

        result = invoke(settings, ["sync", "--images-dir", str(other)])

        assert result.exit_code == 0
        assert "Synced 1 new images" in result.output


class TestResetCommand:
    """Tests for the reset command."""

    def test_reset_clears_dataset_and_images(
        self,
        settings: Settings,
        db_path: Path,
        images_dir: Path,
        make_image: Callable,
    ) -> None:
        """Test images are removed but the staging directory survives."""
        ImageDatabase(db_path).add_image({"filename": "a.jpg", "country": "Peru"})
        make_image(images_dir / "Peru" / "a.jpg")
        (images_dir / "temp").mkdir()

        result = invoke(settings, ["reset", "--yes"])

        assert result.exit_code == 0
        assert "Dataset cleared and reset to empty state" in result.output
        assert json.loads(db_path.read_text()) == {
            "images": [],
            "countries": [],
            "tags": [],
        }
        assert not (images_dir / "Peru").exists()
        assert (images_dir / "temp").is_dir()

    def test_reset_keep_images(
        self, settings: Settings, images_dir: Path, make_image: Callable
    ) -> None:
        make_image(images_dir / "Peru" / "a.jpg")

        result = invoke(settings, ["reset", "--yes", "--keep-images"])

        assert result.exit_code == 0
        assert (images_dir / "Peru" / "a.jpg").exists()

    def test_reset_keeps_dataset_inside_image_root(
        self, images_dir: Path, make_image: Callable
    ) -> None:
        """Test the hosted layout, where the dataset and template sit among images."""
        db_path = images_dir / "database.json"
        template = images_dir / "database.json.template"
        seed = '{"images": [], "countries": [], "tags": ["seed"]}'
        template.write_text(seed)
        settings = Settings(
            database_path=db_path, images_dir=images_dir, render=False
        )
        make_image(images_dir / "Japan" / "a.jpg")

        result = invoke(settings, ["reset", "--yes"])

        assert result.exit_code == 0
        assert db_path.exists()
        assert template.read_text() == seed
        assert not (images_dir / "Japan").exists()

    def test_reset_requires_confirmation(
        self, settings: Settings, images_dir: Path, make_image: Callable
    ) -> None:
        make_image(images_dir / "Peru" / "a.jpg")

        result = invoke(settings, ["reset"], input="n\n")

        assert result.exit_code != 0
        assert (images_dir / "Peru" / "a.jpg").exists()

    def test_reset_save_failure(self, settings: Settings) -> None:
        with patch.object(ImageDatabase, "reset", return_value=False):
            result = invoke(settings, ["reset", "--yes"])

        assert result.exit_code == 1
        assert "could not write" in result.output


class TestCountriesCommand:
    """Tests for the countries command."""

    def test_no_images(self, settings: Settings) -> None:
        result = invoke(settings, ["countries"])

        assert result.exit_code == 0
        assert "No images in the dataset" in result.output

    def test_table(self, settings: Settings, db_path: Path) -> None:
        ImageDatabase(db_path).add_image(
            {"id": "p1", "filename": "p1.jpg", "country": "Peru", "featured": True}
        )

        result = invoke(settings, ["countries"])

        assert result.exit_code == 0
        assert "PE" in result.output
        assert "Peru" in result.output
        assert "p1" in result.output
