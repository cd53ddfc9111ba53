# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  文本规范化工具 - 名称比较与单复数处理
  Text Normalization Utilities - Name comparison and pluralization helpers.
"""

from typing import Optional


def normalize_name(text: Optional[str]) -> str:
    """
    规范化名称用于比较（去除首尾空白并转为小写）

    Normalize a name for case-insensitive comparison.

    Accepts *None* safely (returns empty string).

    Example:
        >>> normalize_name("  Vitality ")
        "vitality"
    """
    return (text or "").strip().lower()


def add_s_if_plural_or_zero(word: str, count: int) -> str:
    """
    Append an ``s`` unless the count is exactly one.

    Example:
        >>> add_s_if_plural_or_zero("character", 1)
        "character"
        >>> add_s_if_plural_or_zero("item", 0)
        "items"
    """
    return word if count == 1 else f"{word}s"


def get_are_or_is(count: int) -> str:
    """Return ``is`` for a count of one, otherwise ``are``."""
    return "is" if count == 1 else "are"


def get_noun_and_verb_agreement(noun: str, count: int) -> str:
    """
    Pluralize a noun and pick the matching verb.

    Example:
        >>> get_noun_and_verb_agreement("point", 3)
        "points are"
    """
    return f"{add_s_if_plural_or_zero(noun, count)} {get_are_or_is(count)}"
