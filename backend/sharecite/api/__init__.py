"""HTTP API for sharecite."""

from sharecite.api.routes import citations_router

__all__ = [
    "citations_router",
]
