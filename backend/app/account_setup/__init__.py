"""
Account Setup Engine / 账户设置引擎
Attributes, affected attribute selection, quests and submission assembly
属性、受影响属性选择、任务与提交组装
"""

from .attribute_manager import AttributeManager
from .quest_manager import QuestManager, QuestState, quest_reducer
from .selection_manager import SelectionManager, SelectionState
from .session import AccountSetupSession

__all__ = [
    "AttributeManager",
    "QuestManager",
    "QuestState",
    "quest_reducer",
    "SelectionManager",
    "SelectionState",
    "AccountSetupSession",
]
