"""Configuration module for sharecite."""

from sharecite.config.settings import (
    ShareciteSettings,
    ViewerSettings,
    get_settings,
    get_viewer_settings,
)

__all__ = [
    "ShareciteSettings",
    "ViewerSettings",
    "get_settings",
    "get_viewer_settings",
]
