# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  限流器 - 全局 slowapi 限流实例，供应用与路由共享
  Rate Limiter - Shared slowapi limiter for the app and individual routes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])

# Name lookups are cheap to spam, so they get a tighter budget
NAME_CHECK_RATE_LIMIT = "60/minute"
