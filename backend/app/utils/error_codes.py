# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  提交错误分类 - 将持久化层的不透明错误代码映射为重复/未授权/失败
  Submission Error Classification - Maps opaque persistence error codes to
  duplicate, unauthorized or generic failure.
"""

from typing import Optional, Tuple

DUPLICATE = "duplicate"
UNAUTHORIZED = "unauthorized"
FAILURE = "failure"

# Unique violation / 唯一约束冲突
DUPLICATE_PATTERNS = (
    "23505",
    "unique",
    "duplicate",
    "already exists",
)

# Authentication and permission errors / 认证与权限错误
UNAUTHORIZED_PATTERNS = (
    "42501",
    "28000",
    "pgrst301",
    "unauthorized",
    "permission",
    "forbidden",
    "jwt",
)

MESSAGES = {
    DUPLICATE: "Profile already exists for this user.",
    UNAUTHORIZED: "You are not authorized to create this profile. Please sign in again.",
    FAILURE: "Failed to create profile. Please try again.",
}


def classify_submission_error(code: Optional[str], message: str = "") -> Tuple[str, str]:
    """
    将提交错误分类

    Classify a persistence failure.

    Only the code is matched when present; the message is consulted when
    the sink reported no code.

    Args:
        code: 不透明错误代码 / Opaque error code (may be None)
        message: 原始错误消息 / Raw error message

    Returns:
        元组 (kind, user_message) / Tuple of (kind, user facing message)

    Example:
        >>> classify_submission_error("23505")
        ('duplicate', 'Profile already exists for this user.')
    """
    text = str(code or message or "").lower()
    if any(pattern in text for pattern in DUPLICATE_PATTERNS):
        return DUPLICATE, MESSAGES[DUPLICATE]
    if any(pattern in text for pattern in UNAUTHORIZED_PATTERNS):
        return UNAUTHORIZED, MESSAGES[UNAUTHORIZED]
    return FAILURE, MESSAGES[FAILURE]
