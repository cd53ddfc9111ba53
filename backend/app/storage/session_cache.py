# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  设置会话缓存 - 内存中的 LRU 会话表
  Setup Session Cache - In-memory LRU table of account setup sessions.
"""

import asyncio
from collections import OrderedDict
from typing import Dict, Optional

from app.account_setup.session import AccountSetupSession
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class SessionCache:
    """
    设置会话缓存

    Holds live setup sessions. The least recently used session is evicted
    once ``max_sessions`` is reached.
    """

    def __init__(self, max_sessions: Optional[int] = None):
        self._sessions: "OrderedDict[str, AccountSetupSession]" = OrderedDict()
        self._max_sessions = max_sessions or settings.session_cache_size
        self._lock = asyncio.Lock()

    async def put(self, session: AccountSetupSession) -> None:
        async with self._lock:
            self._sessions[session.session_id] = session
            self._sessions.move_to_end(session.session_id)
            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted setup session %s", evicted)

    async def get(self, session_id: str) -> Optional[AccountSetupSession]:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    async def remove(self, session_id: str) -> bool:
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def get_stats(self) -> Dict[str, int]:
        return {"sessions": len(self._sessions), "max_sessions": self._max_sessions}
