"""API routes for sharecite."""

from sharecite.api.routes.citations import router as citations_router

__all__ = [
    "citations_router",
]
