"""Delivery state machine.

``process_ball`` applies one delivery to a copy of the active innings and
live state, and reports what happened: the new state, the commentary event,
milestones, selection requests and whether the over finished.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from ..schemas.delivery import DeliveryBase, delivery_from_flags
from ..schemas.scorecard import (
    BallEvent,
    BattingEntry,
    DismissalKind,
    Innings,
    LiveState,
)
from .aggregator import calculate_innings_totals
from .errors import MissingPlayersError
from .milestones import Milestone, detect_milestones
from .overs import BALLS_PER_OVER, add_legal_balls, balls_in_over, overs_to_legal_balls
from .phase import PhaseEvent

logger = logging.getLogger(__name__)


class PlayerRole(str, Enum):
    """Live slots the operator has to fill."""
    STRIKER = "striker"
    NON_STRIKER = "non_striker"
    BOWLER = "bowler"


@dataclass
class BallOutcome:
    """Everything a single delivery produced."""
    innings: Innings
    live: LiveState
    event: BallEvent
    milestones: List[Milestone] = field(default_factory=list)
    requests: List[PlayerRole] = field(default_factory=list)
    over_complete: bool = False
    is_wicket: bool = False
    phase: Optional[PhaseEvent] = None  # set by the session


def missing_players(innings: Innings, live: LiveState) -> List[str]:
    """Roles that block a delivery, in the order an operator should fix them."""
    missing = []
    if not live.striker_id:
        missing.append("Striker (Not Selected)")
    elif innings.find_batter(live.striker_id) is None:
        missing.append(f"Striker (ID Mismatch: {live.striker_id})")
    if not live.non_striker_id:
        missing.append("Non-Striker (Not Selected)")
    elif innings.find_batter(live.non_striker_id) is None:
        missing.append("Non-Striker")
    if innings.find_bowler(live.bowler_id) is None:
        missing.append("Bowler")
    return missing


def check_players(innings: Innings, live: LiveState) -> None:
    missing = missing_players(innings, live)
    if missing:
        raise MissingPlayersError(missing)


def _credit_batter(batter: BattingEntry, runs: int) -> None:
    batter.runs += runs
    batter.balls += 1
    if runs == 4:
        batter.fours += 1
    elif runs == 6:
        batter.sixes += 1


def _swap_ends(live: LiveState) -> None:
    live.striker_id, live.non_striker_id = live.non_striker_id, live.striker_id


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def process_ball(
    innings: Innings,
    live: LiveState,
    delivery: DeliveryBase,
    innings_index: int = 0,
) -> BallOutcome:
    """Apply one delivery.

    The caller's ``innings`` and ``live`` are never modified. Raises
    ``MissingPlayersError`` before doing anything if the striker or bowler
    cannot be resolved.
    """
    check_players(innings, live)

    innings = innings.model_copy(deep=True)
    live = live.model_copy()
    striker = innings.find_batter(live.striker_id)
    bowler = innings.find_bowler(live.bowler_id)

    prev_runs = striker.runs
    prev_wickets = bowler.wickets

    runs = delivery.runs
    bat_runs = 0
    extras_runs = 0
    charged = 0
    is_dot = False

    if delivery.kind == "wide":
        extras_runs = 1 + runs
        bowler.wides += extras_runs
        bowler.runs += extras_runs
        charged = extras_runs
        description = f"Wide + {runs} Runs" if runs else "Wide Ball"
    elif delivery.kind == "no_ball":
        extras_runs = 1
        bat_runs = runs
        bowler.no_balls += 1
        bowler.runs += 1 + runs
        charged = 1 + runs
        _credit_batter(striker, runs)
        description = f"No Ball + {runs} Runs" if runs else "No Ball"
    elif delivery.kind == "bye":
        extras_runs = runs
        innings.bye_runs += runs
        striker.balls += 1
        is_dot = True
        description = f"{runs} {_plural(runs, 'Bye')}"
    elif delivery.kind == "leg_bye":
        extras_runs = runs
        bowler.leg_byes += runs
        striker.balls += 1
        is_dot = True
        description = f"{runs} {_plural(runs, 'Leg Bye')}"
    else:
        bat_runs = runs
        bowler.runs += runs
        charged = runs
        _credit_batter(striker, runs)
        is_dot = runs == 0
        description = "Dot Ball" if runs == 0 else f"{runs} {_plural(runs, 'Run')}"

    if delivery.is_legal:
        bowler.overs = add_legal_balls(bowler.overs, 1)
        if is_dot:
            bowler.dots += 1
    live.current_over_runs += charged

    dismissal = delivery.dismissal
    if dismissal is not None:
        striker.how_out = dismissal.kind
        striker.fielder = dismissal.fielder
        striker.bowler = bowler.name
        if dismissal.kind.credits_bowler:
            bowler.wickets += 1
        description = f"WICKET! ({dismissal.kind.value}) {description}"
        live.striker_id = None
        logger.info(f"Wicket: {striker.name} {dismissal.kind.value} b {bowler.name}")

    if delivery.kind != "wide" and runs % 2 == 1:
        _swap_ends(live)

    over_complete = (
        delivery.is_legal
        and balls_in_over(bowler.overs) == 0
        and overs_to_legal_balls(bowler.overs) > 0
    )
    if over_complete:
        if live.current_over_runs == 0:
            bowler.maidens += 1
        _swap_ends(live)
        live.bowler_id = None
        live.current_over_runs = 0
        logger.debug(f"Over complete, {bowler.name} now {bowler.overs}")

    milestones = detect_milestones(prev_runs, striker, prev_wickets, bowler, dismissal is not None)

    innings = calculate_innings_totals(innings)
    legal_balls = overs_to_legal_balls(innings.overs)
    event = BallEvent(
        inning=innings_index,
        over=legal_balls // BALLS_PER_OVER,
        ball_number=legal_balls % BALLS_PER_OVER,
        striker=striker.name,
        bowler=bowler.name,
        runs=bat_runs,
        extras_type=delivery.extras_type,
        extras_runs=extras_runs,
        is_wicket=dismissal is not None,
        dismissal=dismissal.kind if dismissal else None,
        description=description,
    )

    # New batter first, a new bowler only after that
    requests: List[PlayerRole] = []
    if dismissal is not None:
        requests.append(PlayerRole.STRIKER if live.striker_id is None else PlayerRole.NON_STRIKER)
    if over_complete:
        requests.append(PlayerRole.BOWLER)

    return BallOutcome(
        innings=innings,
        live=live,
        event=event,
        milestones=milestones,
        requests=requests,
        over_complete=over_complete,
        is_wicket=dismissal is not None,
    )


def process_ball_from_flags(
    innings: Innings,
    live: LiveState,
    runs: int = 0,
    is_wide: bool = False,
    is_no_ball: bool = False,
    is_wicket: bool = False,
    is_bye: bool = False,
    is_leg_bye: bool = False,
    dismissal_kind: Optional[Union[DismissalKind, str]] = None,
    fielder_name: Optional[str] = None,
    innings_index: int = 0,
) -> BallOutcome:
    """Flag-based entry point, as sent by a scoring pad."""
    delivery = delivery_from_flags(
        runs=runs,
        is_wide=is_wide,
        is_no_ball=is_no_ball,
        is_wicket=is_wicket,
        is_bye=is_bye,
        is_leg_bye=is_leg_bye,
        dismissal_kind=dismissal_kind,
        fielder=fielder_name,
    )
    return process_ball(innings, live, delivery, innings_index)
