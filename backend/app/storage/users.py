"""
User storage / 用户存储

Registry of users and their public usertags (``users.yaml``). Usertags are
stored normalized so lookups are case-insensitive.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from app.account_setup.constants import USERTAG_MAX_LENGTH, USERTAG_MIN_LENGTH, USERTAG_REGEX
from app.exceptions import NameCheckError, ValidationError
from app.storage.base import BaseStorage
from app.utils.cancellation import CancellationToken
from app.utils.logger import get_logger
from app.utils.text import normalize_name
from app.utils.user_id import normalize_user_id

logger = get_logger(__name__)


def validate_usertag(usertag: str) -> List[str]:
    """Length and character checks for a usertag."""
    trimmed = (usertag or "").strip()
    errors = []
    if len(trimmed) < USERTAG_MIN_LENGTH:
        errors.append(f"User Tag must be at least {USERTAG_MIN_LENGTH} characters long")
    elif len(trimmed) > USERTAG_MAX_LENGTH:
        errors.append(f"User Tag must be at most {USERTAG_MAX_LENGTH} characters long")
    if trimmed and not USERTAG_REGEX.match(trimmed):
        errors.append("User Tag may only contain letters, numbers, '_', '-' and '.'")
    return errors


class UserStorage(BaseStorage):
    """Storage operations for users."""

    def get_users_path(self) -> Path:
        return self.data_dir / "users.yaml"

    async def _load_users(self) -> Dict[str, Dict[str, Any]]:
        path = self.get_users_path()
        if not path.exists():
            return {}
        data = await self.read_yaml(path)
        return dict(data.get("users") or {})

    async def register_user(self, user_id: str, usertag: str) -> Dict[str, Any]:
        """
        Register a user with a unique usertag.

        Raises:
            ValidationError: Keyed by ``usertag`` when invalid or taken.
        """
        errors = validate_usertag(usertag)
        if errors:
            raise ValidationError(errors[0], {"usertag": errors})

        user_id = normalize_user_id(user_id)
        path = self.get_users_path()
        self.ensure_dir(path.parent)
        normalized = normalize_name(usertag)

        async with self.file_lock.lock(path):
            users = await self._load_users()
            if any(record.get("usertag") == normalized for record in users.values()):
                message = "User Tag already exists. Please choose another."
                raise ValidationError(message, {"usertag": [message]})
            if user_id in users:
                message = "User already registered"
                raise ValidationError(message, {"user_id": [message]})

            record = {"usertag": normalized, "profile_complete": False}
            users[user_id] = record
            await self.write_yaml(path, {"users": users})

        logger.info("Registered user %s as %s", user_id, normalized)
        return record

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        user_id = normalize_user_id(user_id)
        users = await self._load_users()
        return users.get(user_id)

    async def usertag_exists(
        self,
        candidate: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> bool:
        """
        True when a user already holds ``candidate`` (trimmed, lower-cased).

        Raises:
            OperationCancelled: If ``cancel_token`` is cancelled before the
                result is returned.
            NameCheckError: If the user registry cannot be read.
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        normalized = normalize_name(candidate)
        try:
            users = await self._load_users()
        except (OSError, yaml.YAMLError) as e:
            raise NameCheckError(f"Failed to read user registry: {e}") from e
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return any(record.get("usertag") == normalized for record in users.values())

    async def mark_profile_complete(self, user_id: str) -> bool:
        """Flag a registered user's profile as complete. False when unknown."""
        user_id = normalize_user_id(user_id)
        path = self.get_users_path()
        async with self.file_lock.lock(path):
            users = await self._load_users()
            if user_id not in users:
                return False
            users[user_id] = {**users[user_id], "profile_complete": True}
            await self.write_yaml(path, {"users": users})
        return True

    async def is_profile_complete(self, user_id: str) -> bool:
        record = await self.get_user(user_id)
        return bool(record and record.get("profile_complete"))
