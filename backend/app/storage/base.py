# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  存储基类 - 基于文件的 YAML/文本读写，写入为原子替换
  Base Storage - File-based YAML/text IO with atomic temp-file replacement.
"""

import os
import uuid
from pathlib import Path
from typing import Any, Optional

import aiofiles
import yaml

from app.config import settings
from app.storage.file_lock import get_file_lock


class BaseStorage:
    """
    文件存储基类

    Base class for file-based storages rooted at ``data_dir``.
    """

    encoding = "utf-8"

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.file_lock = get_file_lock()

    def ensure_dir(self, path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        return path

    async def read_text(self, file_path: Path) -> str:
        """
        读取文本文件

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        async with aiofiles.open(file_path, "r", encoding=self.encoding) as f:
            return await f.read()

    async def write_text(self, file_path: Path, content: str) -> None:
        self.ensure_dir(file_path.parent)
        await self._atomic_write(file_path, content)

    async def read_yaml(self, file_path: Path) -> Any:
        """
        读取 YAML 文件

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        raw = await self.read_text(file_path)
        return yaml.safe_load(raw) or {}

    async def write_yaml(self, file_path: Path, data: Any) -> None:
        payload = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
        await self.write_text(file_path, payload)

    async def _atomic_write(self, file_path: Path, content: str) -> None:
        """Write to a sibling temp file, then replace the target in one step."""
        tmp_path = file_path.with_name(f".{file_path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding=self.encoding) as f:
                await f.write(content)
            os.replace(str(tmp_path), str(file_path))
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
