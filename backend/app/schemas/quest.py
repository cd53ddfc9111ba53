"""
Quest data models.
"""

from typing import List

from pydantic import BaseModel, Field

from app.schemas.attribute import AffectedAttribute


class Quest(BaseModel):
    """A recurring task that grants experience and raises attributes."""

    name: str = Field(..., description="Quest name")
    affected_attributes: List[AffectedAttribute] = Field(
        default_factory=list, description="Attributes raised by this quest"
    )
    order: int = Field(default=0, ge=0, description="Zero-based position on the quest board")
    experience_point_value: int = Field(
        default=0, ge=0, le=100, description="Share of the experience pool"
    )


def create_quest(
    name: str,
    affected_attributes: List[AffectedAttribute],
    order: int,
    experience_point_value: int = 0,
) -> Quest:
    """
    Create a quest.

    Raises:
        ValueError: If the name is empty or whitespace only, or the experience
            value lies outside [0, 100].
    """
    if not name or not name.strip():
        raise ValueError("Quest name cannot be empty")
    if not 0 <= experience_point_value <= 100:
        raise ValueError("Experience point value must be between 0 and 100")
    return Quest(
        name=name,
        affected_attributes=list(affected_attributes),
        order=order,
        experience_point_value=experience_point_value,
    )
