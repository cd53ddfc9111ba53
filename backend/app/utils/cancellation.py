# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  取消令牌 - 在异步查询之间传递取消信号
  Cancellation Token - Carries a cancel signal into async lookups.
"""

import asyncio

from app.exceptions import OperationCancelled


class CancellationToken:
    """
    取消令牌

    Cooperative cancellation flag. Lookups call ``raise_if_cancelled`` at
    their checkpoints; owners call ``cancel`` when the result is no longer
    wanted.
    """

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")

    async def wait(self) -> None:
        await self._event.wait()
