"""
User registry models.
"""

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Register user request."""

    user_id: str = Field(..., description="User ID (UUID)")
    usertag: str = Field(..., description="Public, globally unique user tag")


class UserRecord(BaseModel):
    """Registered user."""

    user_id: str = Field(..., description="User ID")
    usertag: str = Field(..., description="Normalized user tag")
    profile_complete: bool = Field(default=False, description="Whether account setup is finished")
