"""Live ball-by-ball scoring engine."""

from .errors import (
    ScoringError,
    MissingPlayersError,
    SelectionError,
    InningsClosedError,
    PersistenceError,
    SaveInProgressError,
    StatsAlreadyAppliedError,
)
from .aggregator import calculate_innings_totals, aggregate_scorecard
from .state_machine import BallOutcome, PlayerRole, process_ball, process_ball_from_flags
from .milestones import Milestone, MilestoneType, detect_milestones
from .phase import PhaseEvent, MatchOutcome, determine_result
from .history import HistoryManager, HistoryState
from .validation import ScorecardValidator, ValidationIssue, ValidationResult
from .session import MatchSession

__all__ = [
    "ScoringError",
    "MissingPlayersError",
    "SelectionError",
    "InningsClosedError",
    "PersistenceError",
    "SaveInProgressError",
    "StatsAlreadyAppliedError",
    "calculate_innings_totals",
    "aggregate_scorecard",
    "BallOutcome",
    "PlayerRole",
    "process_ball",
    "process_ball_from_flags",
    "Milestone",
    "MilestoneType",
    "detect_milestones",
    "PhaseEvent",
    "MatchOutcome",
    "determine_result",
    "HistoryManager",
    "HistoryState",
    "ScorecardValidator",
    "ValidationIssue",
    "ValidationResult",
    "MatchSession",
]
