"""
Game constants / 游戏常量
Limits and fixed values shared by the account setup engine.
"""

import re

from app.schemas.attribute import AttributeStrength

# Letters, digits, space, the em dash (U+2014) and _ : ! ' " ( ) $ @ % & * - = + . /
SAFE_CHARACTERS_REGEX = re.compile(r"^[a-zA-Z0-9 _:!'\"()$@%&*\-=+./ —]+$")

REGULAR_NAME_MIN_LENGTH = 1
REGULAR_NAME_MAX_LENGTH = 30

ATTRIBUTE_NAME_MIN_LENGTH = REGULAR_NAME_MIN_LENGTH
ATTRIBUTE_NAME_MAX_LENGTH = REGULAR_NAME_MAX_LENGTH

QUEST_NAME_MIN_LENGTH = 1
QUEST_NAME_MAX_LENGTH = 50

MIN_QUESTS_ALLOWED = 1
MAX_QUESTS_ALLOWED = 50
MAX_EXPERIENCE_POINTS_PER_QUEST = 100

MIN_ATTRIBUTES_ALLOWED = 1
MAX_ATTRIBUTES_ALLOWED = 50

MIN_AFFECTED_ATTRIBUTES_PER_QUEST = 1
MAX_AFFECTED_ATTRIBUTES_PER_QUEST = 50

# Fixed experience pool divided across all quests
TOTAL_EXPERIENCE_POINTS = 100

# Required attribute, applied to every quest and never deletable
REQUIRED_ATTRIBUTE_NAME = "Discipline"

# Shown by the selection draft when every attribute is already selected
NO_ATTRIBUTES_AVAILABLE_TEXT = "N/A"

DEFAULT_ATTRIBUTE_NAMES = (
    REQUIRED_ATTRIBUTE_NAME,
    "Vitality",
    "Intelligence",
    "Fitness",
)

STRENGTH_TO_INT = {
    AttributeStrength.NORMAL: 1,
    AttributeStrength.PLUS: 2,
    AttributeStrength.PLUS_PLUS: 3,
}

# Public user tag, globally unique and compared normalized
USERTAG_MIN_LENGTH = 3
USERTAG_MAX_LENGTH = 30
USERTAG_REGEX = re.compile(r"^[a-zA-Z0-9_.\-]+$")
