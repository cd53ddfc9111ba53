"""
Submission assembly / 提交组装

Flattens validated attributes and quests into the row sets written by the
profile transaction. Positions are list indices.
"""

from typing import Sequence

from app.account_setup.constants import STRENGTH_TO_INT
from app.schemas.attribute import Attribute
from app.schemas.profile import AttributeRow, ProfileTransaction, QuestAttributeRow, QuestRow
from app.schemas.quest import Quest


def build_profile_transaction(
    attributes: Sequence[Attribute],
    quests: Sequence[Quest],
) -> ProfileTransaction:
    """Build the transaction payload. Inputs are expected to be validated."""
    attribute_rows = [
        AttributeRow(name=attr.name, position=index) for index, attr in enumerate(attributes)
    ]
    quest_rows = [
        QuestRow(name=quest.name, experience_share=quest.experience_point_value, position=index)
        for index, quest in enumerate(quests)
    ]
    join_rows = [
        QuestAttributeRow(
            quest_name=quest.name,
            attribute_name=affected.name,
            attribute_power=STRENGTH_TO_INT[affected.strength],
        )
        for quest in quests
        for affected in quest.affected_attributes
    ]
    return ProfileTransaction(
        attributes=attribute_rows,
        quests=quest_rows,
        quests_attributes=join_rows,
    )
