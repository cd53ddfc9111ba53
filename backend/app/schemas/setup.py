"""
Account setup request and snapshot models.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.attribute import AffectedAttribute, Attribute, AttributeStrength, Direction
from app.schemas.quest import Quest


class SetupSessionCreate(BaseModel):
    """Create setup session request."""

    attributes: Optional[List[str]] = Field(
        default=None, description="Initial attribute names (defaults are used when omitted)"
    )


class AttributeCreate(BaseModel):
    """Add attribute request."""

    name: str = Field(..., description="Attribute name")


class MoveRequest(BaseModel):
    """Reorder or experience adjustment request."""

    direction: Direction = Field(..., description="up or down")


class NamedMoveRequest(MoveRequest):
    """Move request for a named attribute or quest."""

    name: str = Field(..., description="Target attribute or quest name")


class SelectionUpdate(BaseModel):
    """Update the in-progress affected attribute choice."""

    name: Optional[str] = Field(default=None, description="Current attribute name")
    strength: Optional[AttributeStrength] = Field(default=None, description="Current strength")


class QuestCommit(BaseModel):
    """Commit the current quest draft."""

    name: str = Field(..., description="Quest name")
    experience_point_value: int = Field(default=0, ge=0, le=100, description="Experience share")


class SubmitRequest(BaseModel):
    """Submit the finished profile."""

    user_id: str = Field(..., description="User ID (UUID)")


class SelectionSnapshot(BaseModel):
    """Selection draft state."""

    available_attributes: List[Attribute] = Field(default_factory=list)
    selected_attributes: List[AffectedAttribute] = Field(default_factory=list)
    current_attribute_name: str = Field(..., description="Current attribute or sentinel")
    current_attribute_strength: AttributeStrength = Field(default=AttributeStrength.NORMAL)


class SetupSessionSnapshot(BaseModel):
    """Full account setup session state."""

    session_id: str = Field(..., description="Session ID")
    attributes: List[Attribute] = Field(default_factory=list)
    quests: List[Quest] = Field(default_factory=list)
    points_remaining: int = Field(..., ge=0, le=100)
    selection: SelectionSnapshot
    ready_to_submit: bool = Field(default=False)


class UsertagAvailability(BaseModel):
    """Usertag availability response."""

    candidate: str = Field(..., description="Checked usertag")
    exists: bool = Field(..., description="Whether the usertag is already taken")
