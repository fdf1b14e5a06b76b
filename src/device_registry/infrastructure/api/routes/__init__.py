"""API routes for the Device Registry."""

from .groups_router import router as groups_router
from .system_info_router import router as system_info_router

__all__ = [
    "groups_router",
    "system_info_router",
]
