"""Innings and match phase checks, target and result calculation."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.matches import MatchResult
from ..schemas.scorecard import Innings, ScorecardData
from .overs import overs_to_legal_balls

logger = logging.getLogger(__name__)

MAX_WICKETS = 10


class PhaseEvent(str, Enum):
    """Phase transitions reported after a delivery."""
    OVER_COMPLETE = "over_complete"
    INNINGS_BREAK = "innings_break"
    MATCH_COMPLETE = "match_complete"


@dataclass
class MatchOutcome:
    """Result of a finished match from the home side's point of view."""
    result_type: MatchResult
    result_text: str
    winner: Optional[str] = None
    margin: int = 0
    margin_unit: Optional[str] = None


def is_innings_complete(innings: Innings, total_overs: int) -> bool:
    """All out, or the allotted overs are used up."""
    return (
        innings.wickets >= MAX_WICKETS
        or overs_to_legal_balls(innings.overs) >= total_overs * 6
    )


def target_for(scorecard: ScorecardData) -> int:
    """Runs the chasing side needs: the manual target, or first innings + 1."""
    manual = scorecard.match_info.target
    if manual:
        return manual
    return scorecard.innings[0].total_runs + 1


def chasing_runs(scorecard: ScorecardData) -> int:
    return scorecard.innings[1].total_runs + scorecard.match_info.penalty_runs


def is_chase_complete(scorecard: ScorecardData) -> bool:
    """Target reached, or the second innings has closed."""
    if chasing_runs(scorecard) >= target_for(scorecard):
        return True
    return is_innings_complete(scorecard.innings[1], scorecard.match_info.total_overs)


def is_match_complete(scorecard: ScorecardData) -> bool:
    if scorecard.match_info.result_type == MatchResult.NO_RESULT:
        return True
    return scorecard.current_innings == 1 and is_chase_complete(scorecard)


def check_phase(scorecard: ScorecardData) -> Optional[PhaseEvent]:
    """Phase event reached by the innings currently in play, if any."""
    info = scorecard.match_info
    if scorecard.current_innings == 0:
        if is_innings_complete(scorecard.innings[0], info.total_overs):
            logger.info(
                f"Innings break: {info.batting_first_name} {scorecard.innings[0].total_runs}/"
                f"{scorecard.innings[0].wickets}, target {target_for(scorecard)}"
            )
            return PhaseEvent.INNINGS_BREAK
        return None

    if is_chase_complete(scorecard):
        logger.info("Match complete")
        return PhaseEvent.MATCH_COMPLETE
    return None


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def determine_result(scorecard: ScorecardData) -> MatchOutcome:
    """Work out the winner and result line of a completed chase.

    Returns a pending outcome when the chase is still live.
    """
    info = scorecard.match_info
    if info.result_type == MatchResult.NO_RESULT:
        return MatchOutcome(MatchResult.NO_RESULT, "No Result")
    if not is_chase_complete(scorecard):
        return MatchOutcome(MatchResult.PENDING, "")

    target = target_for(scorecard)
    runs = chasing_runs(scorecard)

    if runs >= target:
        winner = info.batting_second_name
        home_won = not info.home_bats_first
        margin = MAX_WICKETS - scorecard.innings[1].wickets
        unit = "wicket"
    elif runs == target - 1:
        return MatchOutcome(MatchResult.TIE, "Match Tied")
    else:
        winner = info.batting_first_name
        home_won = info.home_bats_first
        margin = target - 1 - runs
        unit = "run"

    return MatchOutcome(
        result_type=MatchResult.WON if home_won else MatchResult.LOST,
        result_text=f"{winner} won by {_plural(margin, unit)}",
        winner=winner,
        margin=margin,
        margin_unit=unit,
    )
