"""API Routers package

Routers are organized by feature domain.
"""

from . import auth_router, channel_router, setup_router, videos_router

__all__ = [
    "auth_router",
    "channel_router",
    "setup_router",
    "videos_router",
]
