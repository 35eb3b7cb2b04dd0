"""FastAPI application factory."""

import logging
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from ..config import Settings
from ..core.database import ImageDatabase, copy_bundled_images
from ..version import __version__
from .routers import library, photos, upload
from .schemas import IMAGES_URL_PREFIX

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, database: Optional[ImageDatabase] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted
        database: Store to serve; built from ``settings`` when omitted
    """
    if settings is None:
        settings = Settings()
    if database is None:
        database = ImageDatabase(
            settings.resolved_database_path,
            template_path=settings.resolved_template_path,
            cache_timeout=settings.cache_timeout_seconds,
        )

    app = FastAPI(
        title="Travel Gallery API",
        description="Photo gallery metadata API",
        version=__version__,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(photos.router, prefix="/api/photos", tags=["photos"])
    app.include_router(library.router, prefix="/api", tags=["library"])
    app.include_router(upload.router, prefix="/api/upload", tags=["upload"])

    @app.get("/health")
    async def health_check() -> Dict[str, str]:
        return {"status": "healthy"}

    @app.get("/api")
    async def api_root() -> Dict[str, str]:
        return {"message": "Travel Gallery API", "version": __version__}

    # Uploaded and synced images, one directory per country
    images_dir = settings.resolved_images_dir
    images_dir.mkdir(parents=True, exist_ok=True)
    if settings.render:
        copy_bundled_images(settings.bundled_images_dir, images_dir)
    app.mount(
        IMAGES_URL_PREFIX, StaticFiles(directory=str(images_dir)), name="images"
    )

    static_dir = settings.static_dir
    if static_dir is not None and (static_dir / "index.html").exists():

        @app.get("/")
        async def serve_index() -> FileResponse:
            return FileResponse(static_dir / "index.html")

        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    else:

        @app.get("/")
        async def redirect_to_docs() -> RedirectResponse:
            return RedirectResponse(url="/docs")

    logger.info(f"Serving dataset {database.db_path} and images from {images_dir}")
    return app
