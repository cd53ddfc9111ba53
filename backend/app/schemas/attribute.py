"""
Attribute data models.
"""

from enum import Enum

from pydantic import BaseModel, Field


class AttributeStrength(str, Enum):
    """Intensity with which a quest raises an attribute."""

    NORMAL = "normal"
    PLUS = "plus"
    PLUS_PLUS = "plusPlus"


class Direction(str, Enum):
    """Move direction for reordering and experience adjustments."""

    UP = "up"
    DOWN = "down"


class Attribute(BaseModel):
    """A self-improvement dimension the user levels up."""

    name: str = Field(..., description="Attribute name")
    order: int = Field(default=0, ge=0, description="Zero-based position in the collection")


class AffectedAttribute(BaseModel):
    """Reference from a quest to an attribute, with a strength modifier."""

    name: str = Field(..., description="Name of the referenced attribute")
    strength: AttributeStrength = Field(
        default=AttributeStrength.NORMAL, description="Strength modifier"
    )


def create_attribute(name: str, order: int) -> Attribute:
    """
    Create an attribute.

    Raises:
        ValueError: If the name is empty or whitespace only.
    """
    if not name or not name.strip():
        raise ValueError("Attribute name cannot be empty")
    return Attribute(name=name, order=order)


def create_affected_attribute(
    name: str,
    strength: AttributeStrength = AttributeStrength.NORMAL,
) -> AffectedAttribute:
    """
    Create an affected attribute.

    Raises:
        ValueError: If the name is empty or whitespace only.
    """
    if not name or not name.strip():
        raise ValueError("Attribute name cannot be empty")
    return AffectedAttribute(name=name, strength=AttributeStrength(strength))
