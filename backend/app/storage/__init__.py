"""
Storage Module / 存储模块
File-based storage for users and profiles, plus the in-memory session cache
基于文件的用户与档案存储，以及内存会话缓存
"""

from .base import BaseStorage
from .profiles import ProfileStorage
from .session_cache import SessionCache
from .users import UserStorage

__all__ = [
    "BaseStorage",
    "ProfileStorage",
    "SessionCache",
    "UserStorage",
]
