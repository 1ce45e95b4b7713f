"""Match session: the single owner of live scoring state.

A ``MatchSession`` wraps a ``ScorecardData`` and exposes every operator
action. Each mutation goes through the same steps: guard checks, undo
snapshot (deliveries only), state machine, aggregation, phase check and
validation.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from ..config import settings
from ..models.matches import MatchResult
from ..schemas import commands as cmd
from ..schemas.delivery import DeliveryBase, NormalDelivery, PendingWicket, delivery_from_flags
from ..schemas.players import Side
from ..schemas.scorecard import (
    BattingEntry,
    BowlingEntry,
    DismissalKind,
    Innings,
    LiveState,
    MatchInfo,
    ScorecardData,
)
from .aggregator import aggregate_scorecard
from .errors import (
    InningsClosedError,
    PersistenceError,
    SaveInProgressError,
    ScoringError,
    SelectionError,
)
from .history import HistoryManager
from .phase import (
    MatchOutcome,
    PhaseEvent,
    check_phase,
    determine_result,
    is_chase_complete,
    is_innings_complete,
    is_match_complete,
    target_for,
)
from .state_machine import BallOutcome, PlayerRole, check_players, process_ball
from .summary import Partnership, Performer, current_partnership, top_performers
from .validation import ScorecardValidator, ValidationResult

logger = logging.getLogger(__name__)


class MatchSession:
    """Live scoring session for one match."""

    def __init__(
        self,
        scorecard: ScorecardData,
        roster: Optional[Any] = None,
        history_max_depth: Optional[int] = None,
    ):
        if history_max_depth is None:
            history_max_depth = settings.scoring.history_max_depth
        self.roster = roster
        self.history = HistoryManager(history_max_depth)
        self.validator = ScorecardValidator()
        self.pending_wicket: Optional[PendingWicket] = None
        self._save_pending = False
        self._data = aggregate_scorecard(scorecard.model_copy(deep=True))
        self.validation: ValidationResult = self.validator.validate(self._data)

    @classmethod
    def new(cls, match_info: MatchInfo, roster: Optional[Any] = None, **kwargs) -> "MatchSession":
        """Start a fresh scorecard for ``match_info``."""
        return cls(ScorecardData(match_info=match_info), roster=roster, **kwargs)

    # State access

    @property
    def data(self) -> ScorecardData:
        """Current scorecard. Treat as read-only; mutate through the session."""
        return self._data

    @property
    def match_id(self) -> Optional[str]:
        return self._data.match_info.id

    @property
    def match_info(self) -> MatchInfo:
        return self._data.match_info

    @property
    def current_innings(self) -> int:
        return self._data.current_innings

    @property
    def innings(self) -> Innings:
        return self._data.innings[self._data.current_innings]

    @property
    def live(self) -> LiveState:
        return self._data.live_state

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def is_saving(self) -> bool:
        return self._save_pending

    @property
    def is_finalized(self) -> bool:
        return self._data.match_info.result_type != MatchResult.PENDING

    @property
    def target(self) -> int:
        return target_for(self._data)

    def batting_side(self, innings_index: Optional[int] = None) -> Side:
        if innings_index is None:
            innings_index = self._data.current_innings
        home_bats = (innings_index == 0) == self._data.match_info.home_bats_first
        return Side.HOME if home_bats else Side.AWAY

    def bowling_side(self, innings_index: Optional[int] = None) -> Side:
        return Side.AWAY if self.batting_side(innings_index) == Side.HOME else Side.HOME

    # Guards

    def _ensure_mutable(self) -> None:
        if self._save_pending:
            raise SaveInProgressError("Wait for the save in progress to finish")

    def _ensure_not_final(self) -> None:
        if self.is_finalized:
            raise InningsClosedError(
                f"Match is finalized ({self._data.match_info.result_type.value})"
            )

    def _ensure_innings_open(self) -> None:
        info = self._data.match_info
        if self._data.current_innings == 0:
            if is_innings_complete(self._data.innings[0], info.total_overs):
                raise InningsClosedError("First innings is complete, start the chase")
        elif is_chase_complete(self._data):
            raise InningsClosedError("Match is complete, finalize the result")

    def _refresh(self) -> None:
        self._data = aggregate_scorecard(self._data)
        self.validation = self.validator.validate(self._data)

    # Selection

    def _resolve_player(self, side: Side, player_id: str, name: Optional[str]) -> str:
        """Display name for ``player_id``, from the roster or the given name."""
        if self.roster is not None:
            for player in self.roster.players_for(side):
                if player.id == player_id:
                    return player.name
        if name:
            return name
        raise SelectionError(f"Player {player_id} is not in the {side.value} squad")

    def _select_batter(self, player_id: str, name: Optional[str]) -> None:
        innings = self.innings
        entry = innings.find_batter(player_id)
        if entry is not None:
            if entry.is_out or entry.how_out == DismissalKind.RETIRED:
                raise SelectionError(f"{entry.name} is out ({entry.how_out.value}) and cannot bat again")
            if entry.how_out in (DismissalKind.RETIRED_HURT, DismissalKind.DID_NOT_BAT):
                entry.how_out = DismissalKind.NOT_OUT
            return
        display = self._resolve_player(self.batting_side(), player_id, name)
        innings.batting.append(BattingEntry(id=player_id, name=display))
        logger.info(f"{display} comes to the crease")

    def select_striker(self, player_id: str, name: Optional[str] = None) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        live = self._data.live_state
        if player_id == live.non_striker_id:
            raise SelectionError("Striker and non-striker must be different players")
        if player_id != live.striker_id:
            self._select_batter(player_id, name)
            live.striker_id = player_id
        self._refresh()

    def select_non_striker(self, player_id: str, name: Optional[str] = None) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        live = self._data.live_state
        if player_id == live.striker_id:
            raise SelectionError("Striker and non-striker must be different players")
        if player_id != live.non_striker_id:
            self._select_batter(player_id, name)
            live.non_striker_id = player_id
        self._refresh()

    def select_bowler(self, player_id: str, name: Optional[str] = None) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        innings = self.innings
        if innings.find_bowler(player_id) is None:
            display = self._resolve_player(self.bowling_side(), player_id, name)
            innings.bowling.append(BowlingEntry(id=player_id, name=display))
        live = self._data.live_state
        live.bowler_id = player_id
        live.current_over_runs = 0
        self._refresh()

    def next_selection(self) -> Optional[PlayerRole]:
        """The live slot the operator has to fill next, if any."""
        if self.is_finalized:
            return None
        try:
            self._ensure_innings_open()
        except InningsClosedError:
            return None
        live = self._data.live_state
        if not live.striker_id:
            return PlayerRole.STRIKER
        if not live.non_striker_id:
            return PlayerRole.NON_STRIKER
        if not live.bowler_id:
            return PlayerRole.BOWLER
        return None

    # Scoring

    def _apply_delivery(self, delivery: DeliveryBase) -> BallOutcome:
        self._ensure_innings_open()
        index = self._data.current_innings
        check_players(self._data.innings[index], self._data.live_state)

        self.history.push(self._data, self._data.ball_log, self._data.live_state)
        outcome = process_ball(self._data.innings[index], self._data.live_state, delivery, index)

        innings = list(self._data.innings)
        innings[index] = outcome.innings
        self._data = self._data.model_copy(update={
            "innings": innings,
            "ball_log": [*self._data.ball_log, outcome.event],
            "live_state": outcome.live,
        })
        self.validation = self.validator.validate(self._data)

        outcome.phase = check_phase(self._data)
        if outcome.phase is None and outcome.over_complete:
            outcome.phase = PhaseEvent.OVER_COMPLETE

        logger.info(f"{outcome.event.over}.{outcome.event.ball_number} {outcome.event.description}")
        return outcome

    def score(self, delivery: DeliveryBase) -> BallOutcome:
        """Score one delivery in the innings in play."""
        self._ensure_mutable()
        self._ensure_not_final()
        if self.pending_wicket is not None:
            raise ScoringError("Confirm or cancel the pending wicket first")
        return self._apply_delivery(delivery)

    def score_flags(
        self,
        runs: int = 0,
        is_wide: bool = False,
        is_no_ball: bool = False,
        is_wicket: bool = False,
        is_bye: bool = False,
        is_leg_bye: bool = False,
        dismissal_kind: Optional[Union[DismissalKind, str]] = None,
        fielder_name: Optional[str] = None,
    ) -> BallOutcome:
        delivery = delivery_from_flags(
            runs, is_wide, is_no_ball, is_wicket, is_bye, is_leg_bye, dismissal_kind, fielder_name
        )
        return self.score(delivery)

    def begin_wicket(self, delivery: Optional[DeliveryBase] = None) -> PendingWicket:
        """Park a delivery until the dismissal kind and fielder are known."""
        self._ensure_mutable()
        self._ensure_not_final()
        self._ensure_innings_open()
        if delivery is None:
            delivery = NormalDelivery()
        if delivery.dismissal is not None:
            raise ScoringError("Dismissal details are supplied when the wicket is confirmed")
        self.pending_wicket = PendingWicket(delivery=delivery, innings_index=self._data.current_innings)
        return self.pending_wicket

    def confirm_wicket(self, kind: Union[DismissalKind, str], fielder: Optional[str] = None) -> BallOutcome:
        """Score the parked delivery with its dismissal attached."""
        self._ensure_mutable()
        self._ensure_not_final()
        if self.pending_wicket is None:
            raise ScoringError("No wicket is pending")
        delivery = self.pending_wicket.confirm(kind, fielder)
        outcome = self._apply_delivery(delivery)
        self.pending_wicket = None
        return outcome

    def cancel_wicket(self) -> None:
        self._ensure_mutable()
        self.pending_wicket = None

    def undo(self) -> bool:
        """Roll back the last delivery. Returns False when there is nothing to undo."""
        self._ensure_mutable()
        snapshot = self.history.pop()
        if snapshot is None:
            return False
        self._data = snapshot.restore()
        self.pending_wicket = None
        self.validation = self.validator.validate(self._data)
        logger.info(f"Undo, {self.history.depth} step(s) left")
        return True

    # Match flow

    def record_toss(self, winner_is_home: bool, decision: str) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        if decision not in ("bat", "bowl"):
            raise ValueError("Toss decision must be one of: bat, bowl")
        if self._data.ball_log:
            raise ScoringError("The toss cannot change once play has started")
        info = self._data.match_info
        winner = info.team_a_name if winner_is_home else info.team_b_name
        info.toss_result = f"{winner} won the toss and elected to {decision}"
        info.home_bats_first = winner_is_home == (decision == "bat")
        self._refresh()

    def set_target(self, target: Optional[int]) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        if target is not None and target < 1:
            raise ValueError("Target must be at least 1")
        self._data.match_info.target = target
        self._refresh()

    def set_penalty_runs(self, runs: int) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        if runs < 0:
            raise ValueError("Penalty runs cannot be negative")
        self._data.match_info.penalty_runs = runs
        self._refresh()

    def start_second_innings(self) -> int:
        """Move play to the chase and return the target."""
        self._ensure_mutable()
        self._ensure_not_final()
        if self._data.current_innings == 1:
            raise ScoringError("Second innings has already started")
        info = self._data.match_info
        if not (is_innings_complete(self._data.innings[0], info.total_overs) or info.target):
            raise ScoringError("First innings is still in progress")
        self.pending_wicket = None
        self._data = self._data.model_copy(update={"current_innings": 1, "live_state": LiveState()})
        self._refresh()
        target = target_for(self._data)
        logger.info(f"{info.batting_second_name} need {target} to win")
        return target

    def finalize(self, player_of_match: Optional[str] = None) -> MatchOutcome:
        """Record the result of a completed match and drop the undo history."""
        self._ensure_mutable()
        self._ensure_not_final()
        if not is_match_complete(self._data):
            raise ScoringError("Match is not complete")
        outcome = determine_result(self._data)
        info = self._data.match_info
        info.result_type = outcome.result_type
        info.match_result = outcome.result_text
        info.player_of_match = player_of_match
        self.history.clear()
        self.pending_wicket = None
        logger.info(f"Match finalized: {outcome.result_text}")
        return outcome

    def declare_no_result(self) -> MatchOutcome:
        self._ensure_mutable()
        self._ensure_not_final()
        info = self._data.match_info
        info.result_type = MatchResult.NO_RESULT
        info.match_result = "No Result"
        self.history.clear()
        self.pending_wicket = None
        logger.info("Match declared no result")
        return MatchOutcome(MatchResult.NO_RESULT, "No Result")

    # Manual corrections, not undoable

    def update_batting_entry(self, innings_index: int, player_id: str, **changes) -> BattingEntry:
        """Edit or add a batting entry directly."""
        self._ensure_mutable()
        self._ensure_not_final()
        batting = self._data.innings[innings_index].batting
        entry = next((b for b in batting if b.id == player_id), None)
        if entry is None:
            updated = BattingEntry.model_validate({"id": player_id, **changes})
            batting.append(updated)
        else:
            updated = BattingEntry.model_validate({**entry.model_dump(), **changes, "id": player_id})
            batting[batting.index(entry)] = updated
        self._refresh()
        return updated

    def update_bowling_entry(self, innings_index: int, player_id: str, **changes) -> BowlingEntry:
        """Edit or add a bowling entry directly."""
        self._ensure_mutable()
        self._ensure_not_final()
        bowling = self._data.innings[innings_index].bowling
        entry = next((b for b in bowling if b.id == player_id), None)
        if entry is None:
            updated = BowlingEntry.model_validate({"id": player_id, **changes})
            bowling.append(updated)
        else:
            updated = BowlingEntry.model_validate({**entry.model_dump(), **changes, "id": player_id})
            bowling[bowling.index(entry)] = updated
        self._refresh()
        return updated

    def remove_entry(self, innings_index: int, player_id: str, role: str = "batting") -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        if role not in ("batting", "bowling"):
            raise ValueError("Role must be one of: batting, bowling")
        innings = self._data.innings[innings_index]
        entries = getattr(innings, role)
        remaining = [e for e in entries if e.id != player_id]
        if len(remaining) == len(entries):
            raise SelectionError(f"No {role} entry for player {player_id}")
        setattr(innings, role, remaining)

        if innings_index == self._data.current_innings:
            live = self._data.live_state
            if role == "batting":
                if live.striker_id == player_id:
                    live.striker_id = None
                if live.non_striker_id == player_id:
                    live.non_striker_id = None
            elif live.bowler_id == player_id:
                live.bowler_id = None
        self._refresh()

    def set_bye_runs(self, innings_index: int, runs: int) -> None:
        self._ensure_mutable()
        self._ensure_not_final()
        if runs < 0:
            raise ValueError("Bye runs cannot be negative")
        self._data.innings[innings_index].bye_runs = runs
        self._refresh()

    # Views

    def validate(self) -> ValidationResult:
        self.validation = self.validator.validate(self._data)
        return self.validation

    def partnership(self) -> Optional[Partnership]:
        return current_partnership(self._data)

    def top_performers(self, limit: int = 5) -> List[Performer]:
        return top_performers(self._data, limit)

    # Commands

    def execute(self, command) -> Any:
        """Dispatch a pydantic command to the matching session method."""
        handlers: Dict[type, Callable[[Any], Any]] = {
            cmd.SelectStriker: lambda c: self.select_striker(c.player_id, c.name),
            cmd.SelectNonStriker: lambda c: self.select_non_striker(c.player_id, c.name),
            cmd.SelectBowler: lambda c: self.select_bowler(c.player_id, c.name),
            cmd.ScoreBall: lambda c: self.score(c.delivery),
            cmd.BeginWicket: lambda c: self.begin_wicket(c.delivery),
            cmd.ConfirmWicket: lambda c: self.confirm_wicket(c.kind, c.fielder),
            cmd.CancelWicket: lambda c: self.cancel_wicket(),
            cmd.Undo: lambda c: self.undo(),
            cmd.RecordToss: lambda c: self.record_toss(c.winner_is_home, c.decision),
            cmd.SetTarget: lambda c: self.set_target(c.target),
            cmd.SetPenaltyRuns: lambda c: self.set_penalty_runs(c.runs),
            cmd.StartChase: lambda c: self.start_second_innings(),
            cmd.Finalize: lambda c: self.finalize(c.player_of_match),
            cmd.DeclareNoResult: lambda c: self.declare_no_result(),
        }
        handler = handlers.get(type(command))
        if handler is None:
            raise ScoringError(f"Unknown command: {command!r}")
        return handler(command)

    # Persistence

    async def save(self, store) -> None:
        """Persist the scorecard. Mutations are refused until this returns."""
        if self._save_pending:
            raise SaveInProgressError("A save is already in progress")
        if self.match_id is None:
            raise PersistenceError("Cannot save a match without an id")
        self._save_pending = True
        try:
            await store.save(self.match_id, self._data.model_copy(deep=True))
            logger.info(f"Match {self.match_id} saved")
        finally:
            self._save_pending = False

    async def apply_career_stats(self, service) -> int:
        """Fold this match into career statistics. Returns players updated."""
        self._ensure_mutable()
        if not self.is_finalized or self.match_info.result_type == MatchResult.NO_RESULT:
            raise ScoringError("Career stats are applied to a finalized match only")
        if self.match_id is None:
            raise PersistenceError("Cannot apply stats for a match without an id")
        return await service.apply_match(self.match_id, self._data)
