"""Request dependencies shared by the routers."""

from fastapi import Request

from ..config import Settings
from ..core.database import ImageDatabase


def get_database(request: Request) -> ImageDatabase:
    """The store created by the application factory."""
    return request.app.state.database


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings
