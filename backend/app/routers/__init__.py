"""
API Routers / API 路由
"""

from .setup_sessions import router as setup_sessions_router
from .users import router as users_router

__all__ = [
    "setup_sessions_router",
    "users_router",
]
