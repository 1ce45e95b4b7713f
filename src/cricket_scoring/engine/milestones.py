"""Milestone detection for a single delivery.

Detection is a stateless comparison of the striker's and bowler's figures
before and after the ball. Every milestone that applies fires on its own.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ..schemas.scorecard import BattingEntry, BowlingEntry

StatValue = Union[int, float, str]


class MilestoneType(str, Enum):
    WICKET = "W"
    FIFTY = "50"
    HUNDRED = "100"
    THREE_WICKETS = "3W"
    FIVE_WICKETS = "5W"


class Milestone(BaseModel):
    """Notification payload for a milestone overlay."""

    type: MilestoneType = Field(..., description="Milestone type")
    title: str = Field(..., description="Headline text")
    player_name: str = Field(..., description="Player the milestone belongs to")
    sub_text: Optional[str] = Field(None, description="Secondary line")
    label1: Optional[str] = None
    value1: Optional[StatValue] = None
    label2: Optional[str] = None
    value2: Optional[StatValue] = None
    label3: Optional[str] = None
    value3: Optional[StatValue] = None
    label4: Optional[str] = None
    value4: Optional[StatValue] = None


def _batting_milestone(kind: MilestoneType, title: str, batter: BattingEntry) -> Milestone:
    return Milestone(
        type=kind, title=title, player_name=batter.name,
        label1="Runs", value1=batter.runs,
        label2="Balls", value2=batter.balls,
        label3="4s", value3=batter.fours,
        label4="6s", value4=batter.sixes,
    )


def _bowling_milestone(kind: MilestoneType, title: str, bowler: BowlingEntry) -> Milestone:
    return Milestone(
        type=kind, title=title, player_name=bowler.name,
        label1="Wickets", value1=bowler.wickets,
        label2="Runs", value2=bowler.runs,
        label3="Overs", value3=bowler.overs,
    )


def wicket_milestone(batter: BattingEntry) -> Milestone:
    return Milestone(
        type=MilestoneType.WICKET,
        title="WICKET!",
        player_name=batter.name,
        sub_text=f"Departing for {batter.runs} ({batter.balls})",
        label1="Runs", value1=batter.runs,
        label2="Balls", value2=batter.balls,
    )


def detect_milestones(
    prev_runs: int,
    batter: BattingEntry,
    prev_wickets: int,
    bowler: BowlingEntry,
    is_wicket: bool = False,
) -> List[Milestone]:
    """Compare before/after figures and return every milestone reached."""
    milestones: List[Milestone] = []

    if is_wicket:
        milestones.append(wicket_milestone(batter))

    if prev_runs < 50 <= batter.runs:
        milestones.append(_batting_milestone(MilestoneType.FIFTY, "HALF CENTURY", batter))
    if prev_runs < 100 <= batter.runs:
        milestones.append(_batting_milestone(MilestoneType.HUNDRED, "CENTURY!", batter))

    # Hauls fire on the exact count only
    if prev_wickets < 3 and bowler.wickets == 3:
        milestones.append(_bowling_milestone(MilestoneType.THREE_WICKETS, "3 WICKET HAUL", bowler))
    if prev_wickets < 5 and bowler.wickets == 5:
        milestones.append(_bowling_milestone(MilestoneType.FIVE_WICKETS, "5 WICKET HAUL", bowler))

    return milestones
