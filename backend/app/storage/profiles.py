# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  档案存储 - 一次性原子写入用户的属性、任务与关联行
  Profile Storage - Atomic one-shot write of a user's attribute, quest and link rows.

错误代码 / Error codes:
  23505  档案已存在 / Profile already exists (unique violation)
  42501  用户ID无效 / Invalid user id (unauthorized)
  58030  写入失败 / IO failure
"""

from pathlib import Path
from typing import Optional

from app.exceptions import ProfileSubmissionError
from app.schemas.profile import ProfileTransaction
from app.storage.base import BaseStorage
from app.utils.logger import get_logger
from app.utils.user_id import canonical_user_id

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"
IO_ERROR = "58030"


class ProfileStorage(BaseStorage):
    """Storage for submitted profiles (``profiles/{user_id}.yaml``)."""

    def get_profile_path(self, user_id: str) -> Path:
        return self.data_dir / "profiles" / f"{canonical_user_id(user_id) or user_id}.yaml"

    async def create_profile_transaction(self, user_id: str, payload: ProfileTransaction) -> None:
        """
        写入完整档案（全有或全无）

        Persist the profile rows for ``user_id`` in a single file replace.

        Raises:
            ProfileSubmissionError: With an opaque ``code`` describing the failure.
        """
        canonical = canonical_user_id(user_id)
        if canonical is None:
            raise ProfileSubmissionError("Invalid user id", code=INSUFFICIENT_PRIVILEGE)
        user_id = canonical

        path = self.get_profile_path(user_id)
        self.ensure_dir(path.parent)

        async with self.file_lock.lock(path):
            if path.exists():
                raise ProfileSubmissionError(
                    "duplicate key value violates unique constraint on profile",
                    code=UNIQUE_VIOLATION,
                )
            try:
                await self.write_yaml(path, {"user_id": user_id, **payload.model_dump()})
            except OSError as e:
                logger.error("Failed to write profile for %s: %s", user_id, e)
                raise ProfileSubmissionError(f"Could not write profile: {e}", code=IO_ERROR) from e

        logger.info(
            "Profile created for %s: %d attributes, %d quests",
            user_id,
            len(payload.attributes),
            len(payload.quests),
        )

    async def get_profile(self, user_id: str) -> Optional[ProfileTransaction]:
        path = self.get_profile_path(user_id)
        if not path.exists():
            return None
        data = await self.read_yaml(path)
        data.pop("user_id", None)
        return ProfileTransaction(**data)

    async def profile_exists(self, user_id: str) -> bool:
        return self.get_profile_path(user_id).exists()
