"""Pydantic schemas for match record validation."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.matches import MatchResult


class MatchBase(BaseModel):
    """Base match schema with common fields."""

    opponent: str = Field(..., min_length=1, max_length=100, description="Opponent name")
    match_date: Optional[date] = Field(None, description="Match date")
    venue: Optional[str] = Field(None, max_length=200, description="Venue")
    tournament: Optional[str] = Field(None, max_length=200, description="Tournament name")
    total_overs: Optional[int] = Field(None, ge=1, description="Overs per innings")
    squad: List[str] = Field(default_factory=list, description="Home player ids")
    opponent_squad: List[str] = Field(default_factory=list, description="Opponent player names")

    @field_validator("squad", "opponent_squad")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        """Validate that a squad lists each player once."""
        if len(set(v)) != len(v):
            raise ValueError("Squad contains duplicate players")
        return v


class MatchCreate(MatchBase):
    """Schema for creating a new match."""
    pass


class MatchResponse(MatchBase):
    """Schema for match response data."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Match ID")
    result: MatchResult = Field(..., description="Result from the home side's view")
    is_upcoming: bool = Field(..., description="Whether the match is still to be completed")
    stats_updated: bool = Field(..., description="Whether career stats were applied")
    is_completed: bool = Field(..., description="Whether match is completed")

    @field_validator("squad", "opponent_squad", mode="before")
    @classmethod
    def validate_none_squad(cls, v):
        return v or []
