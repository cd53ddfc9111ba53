# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  文件锁管理器 - 进程内按路径加锁，保护"检查后写入"序列
  File Lock Manager - Per-path in-process locks guarding check-then-write sequences.

实现方式 / Implementation:
  每个解析后的路径对应一个 asyncio.Lock。仅适用于单进程部署。
  One asyncio.Lock per resolved path. Single-process deployments only.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

from app.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class FileLockManager:
    """
    路径锁管理器

    Hands out one lock per file path. Locks for different paths never block
    each other.
    """

    def __init__(self, max_idle_locks: int = 1000):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._max_idle_locks = max_idle_locks

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            if len(self._locks) >= self._max_idle_locks:
                self._prune()
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _prune(self) -> None:
        idle = [key for key, lock in self._locks.items() if not lock.locked()]
        for key in idle:
            del self._locks[key]
        logger.debug("Pruned %d idle file locks", len(idle))

    @asynccontextmanager
    async def lock(self, file_path: Path, timeout: Optional[float] = 30.0) -> AsyncIterator[None]:
        """
        获取路径锁

        Hold the lock for ``file_path`` for the duration of the block.

        Raises:
            StorageError: If the lock is not acquired within ``timeout`` seconds.
        """
        lock = self._lock_for(str(Path(file_path).resolve()))
        try:
            await asyncio.wait_for(lock.acquire(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise StorageError(f"Timed out waiting for lock on {file_path}") from e
        try:
            yield
        finally:
            lock.release()


# 全局锁管理器 / Global lock manager
_file_lock: Optional[FileLockManager] = None


def get_file_lock() -> FileLockManager:
    """Process-wide lock manager (singleton)."""
    global _file_lock
    if _file_lock is None:
        _file_lock = FileLockManager()
    return _file_lock
