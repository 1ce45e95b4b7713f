"""Pydantic schemas for career statistics responses."""

from pydantic import BaseModel, ConfigDict, Field


class PlayerCareerStatsResponse(BaseModel):
    """Schema for player career statistics response."""

    model_config = ConfigDict(from_attributes=True)

    player_id: int = Field(..., description="Player ID")
    matches: int = Field(0, ge=0, description="Matches played")
    innings_batted: int = Field(0, ge=0, description="Innings batted")
    not_outs: int = Field(0, ge=0, description="Not outs")
    runs: int = Field(0, ge=0, description="Career runs")
    balls_faced: int = Field(0, ge=0, description="Career balls faced")
    fours: int = Field(0, ge=0, description="Career fours")
    sixes: int = Field(0, ge=0, description="Career sixes")
    fifties: int = Field(0, ge=0, description="Career fifties")
    hundreds: int = Field(0, ge=0, description="Career centuries")
    ducks: int = Field(0, ge=0, description="Career ducks")
    highest_score: str = Field("0", description="Highest score, '*' marks not out")
    innings_bowled: int = Field(0, ge=0, description="Innings bowled")
    balls_bowled: int = Field(0, ge=0, description="Legal balls bowled")
    maidens: int = Field(0, ge=0, description="Career maidens")
    runs_conceded: int = Field(0, ge=0, description="Career runs conceded")
    wickets: int = Field(0, ge=0, description="Career wickets")
    four_wickets: int = Field(0, ge=0, description="Four wicket hauls")
    five_wickets: int = Field(0, ge=0, description="Five wicket hauls")
    best_bowling: str = Field("0/0", description="Best bowling figures")
    batting_average: float = Field(0.0, ge=0.0, description="Career batting average")
    strike_rate: float = Field(0.0, ge=0.0, description="Career strike rate")
    economy_rate: float = Field(0.0, ge=0.0, description="Career economy rate")
