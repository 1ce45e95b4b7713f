"""Pydantic schemas for the live scorecard state.

These models are the engine's working data and also the persisted blob
``{matchInfo, innings[2], ballLog, liveState}``. Field names are snake_case in
Python and camelCase on the wire.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.matches import MatchResult


class DismissalKind(str, Enum):
    """Closed set of values for a batting entry's ``how_out``."""
    NOT_OUT = "Not Out"
    BOWLED = "Bowled"
    CAUGHT = "Caught"
    LBW = "LBW"
    RUN_OUT = "Run Out"
    STUMPED = "Stumped"
    HIT_WICKET = "Hit Wicket"
    RETIRED_HURT = "Retired Hurt"
    RETIRED = "Retired"
    OBSTRUCTING_FIELD = "Obstructing Field"
    TIMED_OUT = "Timed Out"
    DID_NOT_BAT = "Did not bat"

    @property
    def is_dismissal(self) -> bool:
        """Whether this kind counts as a fallen wicket."""
        return self not in (
            DismissalKind.NOT_OUT,
            DismissalKind.RETIRED_HURT,
            DismissalKind.RETIRED,
            DismissalKind.DID_NOT_BAT,
        )

    @property
    def credits_bowler(self) -> bool:
        """Whether the bowler's wicket tally goes up."""
        return self.is_dismissal and self not in (
            DismissalKind.RUN_OUT,
            DismissalKind.TIMED_OUT,
            DismissalKind.OBSTRUCTING_FIELD,
        )


class ExtrasType(str, Enum):
    """Extras code recorded on a ball event."""
    WIDE = "WD"
    NO_BALL = "NB"
    BYE = "B"
    LEG_BYE = "LB"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BattingEntry(CamelModel):
    """One batter's line on the scorecard."""

    id: str = Field(..., min_length=1, description="Roster player id")
    name: str = Field(..., description="Display name")
    runs: int = Field(0, ge=0)
    balls: int = Field(0, ge=0)
    fours: int = Field(0, ge=0)
    sixes: int = Field(0, ge=0)
    how_out: DismissalKind = DismissalKind.NOT_OUT
    fielder: Optional[str] = None
    bowler: Optional[str] = None

    @property
    def is_out(self) -> bool:
        return self.how_out.is_dismissal


class BowlingEntry(CamelModel):
    """One bowler's figures. ``overs`` uses overs.balls notation."""

    id: str = Field(..., min_length=1, description="Roster player id")
    name: str = Field(..., description="Display name")
    overs: float = Field(0.0, ge=0)
    maidens: int = Field(0, ge=0)
    runs: int = Field(0, ge=0)
    wickets: int = Field(0, ge=0)
    wides: int = Field(0, ge=0)
    no_balls: int = Field(0, ge=0)
    leg_byes: int = Field(0, ge=0)
    dots: int = Field(0, ge=0)

    @field_validator("overs", mode="before")
    @classmethod
    def validate_overs(cls, v: Union[int, float, str]) -> float:
        """Normalise overs and reject a balls part above 5."""
        from ..engine.overs import legal_balls_to_overs, overs_to_legal_balls

        return legal_balls_to_overs(overs_to_legal_balls(v))


class Innings(CamelModel):
    """Raw batting and bowling entries plus derived totals.

    ``extras``, ``total_runs``, ``wickets`` and ``overs`` are never edited
    directly; the aggregator recomputes them after every change.
    """

    batting: List[BattingEntry] = Field(default_factory=list)
    bowling: List[BowlingEntry] = Field(default_factory=list)
    bye_runs: int = Field(0, ge=0)

    extras: int = 0
    total_runs: int = 0
    wickets: int = 0
    overs: float = 0.0

    def find_batter(self, player_id: Optional[str]) -> Optional[BattingEntry]:
        if not player_id:
            return None
        return next((b for b in self.batting if b.id == player_id), None)

    def find_bowler(self, player_id: Optional[str]) -> Optional[BowlingEntry]:
        if not player_id:
            return None
        return next((b for b in self.bowling if b.id == player_id), None)


class MatchInfo(CamelModel):
    """Match-level settings the engine reads while scoring."""

    id: Optional[str] = None
    team_a_name: str = Field(..., description="Home side")
    team_b_name: str = Field(..., description="Opponent")
    toss_result: str = ""
    match_result: str = ""
    date: Optional[str] = None
    venue: str = ""
    tournament: str = ""
    result_type: MatchResult = MatchResult.PENDING
    squad: List[str] = Field(default_factory=list, description="Home player ids")
    opponent_squad: List[str] = Field(default_factory=list, description="Opponent player names")
    total_overs: int = Field(20, ge=1)
    target: Optional[int] = Field(None, ge=1, description="Manual target override")
    penalty_runs: int = Field(0, ge=0)
    home_bats_first: bool = True
    player_of_match: Optional[str] = None

    @property
    def batting_first_name(self) -> str:
        return self.team_a_name if self.home_bats_first else self.team_b_name

    @property
    def batting_second_name(self) -> str:
        return self.team_b_name if self.home_bats_first else self.team_a_name


class LiveState(CamelModel):
    """Who is on strike, at the other end, and bowling."""

    striker_id: Optional[str] = None
    non_striker_id: Optional[str] = None
    bowler_id: Optional[str] = None
    current_over_runs: int = Field(0, ge=0, description="Runs charged to the bowler this over")


class BallEvent(CamelModel):
    """Append-only commentary log entry for one delivery."""

    inning: int = Field(..., ge=0, le=1)
    over: int = Field(..., ge=0)
    ball_number: int = Field(..., ge=0, le=5)
    striker: str
    bowler: str
    runs: int = Field(0, ge=0, description="Runs off the bat")
    extras_type: Optional[ExtrasType] = None
    extras_runs: int = Field(0, ge=0)
    is_wicket: bool = False
    dismissal: Optional[DismissalKind] = None
    description: str = ""

    @property
    def total_runs(self) -> int:
        return self.runs + self.extras_runs

    @property
    def is_legal(self) -> bool:
        return self.extras_type not in (ExtrasType.WIDE, ExtrasType.NO_BALL)


class ScorecardData(CamelModel):
    """Complete engine state for one match."""

    match_info: MatchInfo
    innings: List[Innings] = Field(default_factory=lambda: [Innings(), Innings()])
    ball_log: List[BallEvent] = Field(default_factory=list)
    live_state: LiveState = Field(default_factory=LiveState)
    current_innings: int = Field(0, ge=0, le=1)

    @field_validator("innings")
    @classmethod
    def validate_two_innings(cls, v: List[Innings]) -> List[Innings]:
        if len(v) != 2:
            raise ValueError("A scorecard holds exactly two innings")
        return v

    def to_blob(self) -> dict:
        """Serialise for the persistence sink."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_blob(cls, blob: dict) -> "ScorecardData":
        return cls.model_validate(blob)
