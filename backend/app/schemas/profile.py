"""
Profile transaction models.

Row shapes written by the atomic profile creation transaction. Positions are
zero-based list indices and order must be preserved.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AttributeRow(BaseModel):
    """Attribute row."""

    name: str = Field(..., description="Attribute name")
    position: int = Field(..., ge=0, description="Zero-based position")


class QuestRow(BaseModel):
    """Quest row."""

    name: str = Field(..., description="Quest name")
    experience_share: int = Field(..., ge=0, le=100, description="Percentage of experience")
    position: int = Field(..., ge=0, description="Zero-based position")


class QuestAttributeRow(BaseModel):
    """Quest to attribute link row."""

    quest_name: str = Field(..., description="Quest name")
    attribute_name: str = Field(..., description="Attribute gaining experience")
    attribute_power: int = Field(..., ge=1, le=3, description="Integer encoded strength")


class ProfileTransaction(BaseModel):
    """Full payload for one profile creation transaction."""

    attributes: List[AttributeRow] = Field(default_factory=list)
    quests: List[QuestRow] = Field(default_factory=list)
    quests_attributes: List[QuestAttributeRow] = Field(default_factory=list)


class SubmissionResult(BaseModel):
    """Outcome of a profile submission."""

    success: bool = Field(..., description="Whether the profile was persisted")
    message: Optional[str] = Field(default=None, description="Feedback message")
    errors: Dict[str, List[str]] = Field(default_factory=dict, description="Field errors")
    error_kind: Optional[str] = Field(
        default=None, description="duplicate | unauthorized | failure"
    )
