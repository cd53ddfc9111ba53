# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  依赖注入工厂 - FastAPI Depends() 工厂函数，统一管理存储与服务实例创建
  Dependency Injection - FastAPI Depends() factories for storage and service instances.

设计原则 / Design Principles:
  所有Router应通过 Depends() 获取实例，而非模块级实例化。
  Tests override these factories through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from app.services.profile_service import ProfileService
from app.storage.profiles import ProfileStorage
from app.storage.session_cache import SessionCache
from app.storage.users import UserStorage


@lru_cache(maxsize=1)
def get_profile_storage() -> ProfileStorage:
    """
    获取或创建ProfileStorage的单例实例

    Get or create singleton ProfileStorage instance.
    """
    return ProfileStorage()


@lru_cache(maxsize=1)
def get_user_storage() -> UserStorage:
    """
    获取或创建UserStorage的单例实例

    Get or create singleton UserStorage instance.
    """
    return UserStorage()


@lru_cache(maxsize=1)
def get_session_cache() -> SessionCache:
    """
    获取或创建SessionCache的单例实例

    Get or create singleton SessionCache instance.
    """
    return SessionCache()


def get_profile_service(
    profile_storage: ProfileStorage = Depends(get_profile_storage),
    user_storage: UserStorage = Depends(get_user_storage),
) -> ProfileService:
    """
    构建ProfileService（使用当前的存储依赖）

    Build a ProfileService wired to the current storage singletons.
    """
    return ProfileService(profile_storage, user_storage)
