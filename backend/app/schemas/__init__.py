"""
Pydantic Data Models / Pydantic 数据模型
Define data structures for API and internal use / 定义 API 和内部使用的数据结构
"""

from .attribute import (
    AffectedAttribute,
    Attribute,
    AttributeStrength,
    Direction,
    create_affected_attribute,
    create_attribute,
)
from .quest import Quest, create_quest
from .profile import (
    AttributeRow,
    ProfileTransaction,
    QuestAttributeRow,
    QuestRow,
    SubmissionResult,
)

__all__ = [
    "AffectedAttribute",
    "Attribute",
    "AttributeStrength",
    "Direction",
    "create_affected_attribute",
    "create_attribute",
    "Quest",
    "create_quest",
    "AttributeRow",
    "ProfileTransaction",
    "QuestAttributeRow",
    "QuestRow",
    "SubmissionResult",
]
