"""Application configuration."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Persistent disk mount used by the hosted deployment
RENDER_IMAGES_DIR = Path("/opt/render/project/src/public/images")

LOCAL_DATABASE_PATH = Path("data") / "images.json"
LOCAL_IMAGES_DIR = Path("public") / "images"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    database_path: Optional[Path] = None
    template_path: Optional[Path] = None
    images_dir: Optional[Path] = None
    static_dir: Optional[Path] = None
    # Images shipped with the app, copied onto the persistent disk when hosted
    bundled_images_dir: Path = LOCAL_IMAGES_DIR
    cache_timeout_seconds: float = 30.0

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Set by the hosting platform, not prefixed
    render: bool = Field(default=False, validation_alias="RENDER")

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def resolved_database_path(self) -> Path:
        """Backing JSON file, on the persistent disk when hosted."""
        if self.database_path is not None:
            return self.database_path
        if self.render:
            return RENDER_IMAGES_DIR / "database.json"
        return LOCAL_DATABASE_PATH

    @property
    def resolved_images_dir(self) -> Path:
        """Root directory holding one sub-directory per country."""
        if self.images_dir is not None:
            return self.images_dir
        if self.render:
            return RENDER_IMAGES_DIR
        return LOCAL_IMAGES_DIR

    @property
    def resolved_template_path(self) -> Path:
        """Seed document used when the backing file does not exist yet."""
        if self.template_path is not None:
            return self.template_path
        db_path = self.resolved_database_path
        return db_path.with_name(db_path.name + ".template")
