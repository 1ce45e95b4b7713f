"""Pydantic schemas for player data validation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlayerBase(BaseModel):
    """Base player schema with common fields."""

    name: str = Field(..., min_length=1, max_length=100, description="Player name")
    role: Optional[str] = Field(None, max_length=20, description="Playing role")
    is_active: bool = Field(True, description="Whether player is available for selection")

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        """Validate playing role."""
        if v is not None:
            valid_roles = ["Batsman", "Bowler", "All-rounder", "Wicket-keeper"]
            if v not in valid_roles:
                raise ValueError(f"Role must be one of: {', '.join(valid_roles)}")
        return v


class PlayerCreate(PlayerBase):
    """Schema for creating a new player."""
    pass


class PlayerResponse(PlayerBase):
    """Schema for player response data."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Player ID")


class Side(str, Enum):
    """Which team a roster belongs to."""
    HOME = "home"
    AWAY = "away"


class RosterPlayer(BaseModel):
    """Player eligible for selection in a match."""

    id: str = Field(..., min_length=1, description="Roster player id")
    name: str = Field(..., min_length=1, description="Display name")
