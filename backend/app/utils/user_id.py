"""
User ID utilities / 用户ID工具

User ids are UUIDs. Any accepted spelling (upper-case, braces, urn prefix)
maps to the canonical lower-case hyphenated form so every store keys a user
the same way.
"""

from typing import Optional
import uuid


def canonical_user_id(user_id: str) -> Optional[str]:
    """Canonical UUID string, or None when ``user_id`` is not a UUID / 规范化用户ID"""
    try:
        return str(uuid.UUID(str(user_id).strip()))
    except ValueError:
        return None


def normalize_user_id(user_id: str) -> str:
    """Canonical form for UUIDs; other ids are only trimmed."""
    return canonical_user_id(user_id) or str(user_id).strip()
