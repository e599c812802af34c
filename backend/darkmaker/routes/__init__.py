"""
Routes module - contains all API route handlers
"""

from .render import router as render_router
from .media import router as media_router

__all__ = [
    "render_router",
    "media_router",
]
