"""Pydantic schemas for operator commands.

Commands are the serialisable form of every action a scorer can take, so a
match can be driven from a JSON file as well as by direct method calls.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from .delivery import Delivery
from .scorecard import DismissalKind


class SelectStriker(BaseModel):
    action: Literal["select_striker"] = "select_striker"
    player_id: str = Field(..., min_length=1, description="Roster player id")
    name: Optional[str] = Field(None, description="Display name when the player is not on the roster")


class SelectNonStriker(BaseModel):
    action: Literal["select_non_striker"] = "select_non_striker"
    player_id: str = Field(..., min_length=1, description="Roster player id")
    name: Optional[str] = Field(None, description="Display name when the player is not on the roster")


class SelectBowler(BaseModel):
    action: Literal["select_bowler"] = "select_bowler"
    player_id: str = Field(..., min_length=1, description="Roster player id")
    name: Optional[str] = Field(None, description="Display name when the player is not on the roster")


class ScoreBall(BaseModel):
    action: Literal["ball"] = "ball"
    delivery: Delivery


class BeginWicket(BaseModel):
    """Park a delivery until the dismissal details are known."""

    action: Literal["begin_wicket"] = "begin_wicket"
    delivery: Delivery

    @field_validator("delivery")
    @classmethod
    def validate_no_dismissal(cls, v):
        if v.dismissal is not None:
            raise ValueError("Dismissal details are supplied when the wicket is confirmed")
        return v


class ConfirmWicket(BaseModel):
    action: Literal["confirm_wicket"] = "confirm_wicket"
    kind: DismissalKind = Field(..., description="Dismissal kind")
    fielder: Optional[str] = Field(None, description="Catcher, keeper or thrower")


class CancelWicket(BaseModel):
    action: Literal["cancel_wicket"] = "cancel_wicket"


class Undo(BaseModel):
    action: Literal["undo"] = "undo"


class RecordToss(BaseModel):
    action: Literal["toss"] = "toss"
    winner_is_home: bool = Field(..., description="Whether the home side won the toss")
    decision: Literal["bat", "bowl"] = Field(..., description="Toss decision")


class SetTarget(BaseModel):
    action: Literal["set_target"] = "set_target"
    target: Optional[int] = Field(..., ge=1, description="Manual target, or null to clear")


class SetPenaltyRuns(BaseModel):
    action: Literal["penalty_runs"] = "penalty_runs"
    runs: int = Field(..., ge=0, description="Penalty runs awarded to the chasing side")


class StartChase(BaseModel):
    action: Literal["start_chase"] = "start_chase"


class Finalize(BaseModel):
    action: Literal["finalize"] = "finalize"
    player_of_match: Optional[str] = Field(None, description="Player of the match")


class DeclareNoResult(BaseModel):
    action: Literal["no_result"] = "no_result"


Command = Annotated[
    Union[
        SelectStriker,
        SelectNonStriker,
        SelectBowler,
        ScoreBall,
        BeginWicket,
        ConfirmWicket,
        CancelWicket,
        Undo,
        RecordToss,
        SetTarget,
        SetPenaltyRuns,
        StartChase,
        Finalize,
        DeclareNoResult,
    ],
    Field(discriminator="action"),
]

command_list_adapter = TypeAdapter(List[Command])


def parse_commands(data: list) -> list:
    """Validate a list of raw command mappings."""
    return command_list_adapter.validate_python(data)
