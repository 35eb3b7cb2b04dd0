"""Pytest configuration for API tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from travel_gallery.api.app import create_app
from travel_gallery.config import Settings
from travel_gallery.core.database import ImageDatabase


@pytest.fixture
def settings(db_path: Path, images_dir: Path) -> Settings:
    return Settings(database_path=db_path, images_dir=images_dir, render=False)


@pytest.fixture
def client(settings: Settings, database: ImageDatabase):
    """Create a test client serving the per-test database."""
    app = create_app(settings=settings, database=database)

    with TestClient(app) as test_client:
        yield test_client
