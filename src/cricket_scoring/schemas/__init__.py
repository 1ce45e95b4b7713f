"""Pydantic schemas for data validation."""

from .scorecard import (
    DismissalKind,
    ExtrasType,
    BattingEntry,
    BowlingEntry,
    Innings,
    MatchInfo,
    LiveState,
    BallEvent,
    ScorecardData,
)
from .delivery import (
    Dismissal,
    Delivery,
    PendingWicket,
    NormalDelivery,
    WideDelivery,
    NoBallDelivery,
    ByeDelivery,
    LegByeDelivery,
    parse_delivery,
    delivery_from_flags,
)
from .commands import Command, parse_commands
from .matches import MatchCreate, MatchResponse
from .players import PlayerCreate, PlayerResponse, RosterPlayer, Side
from .player_stats import PlayerCareerStatsResponse

__all__ = [
    "DismissalKind",
    "ExtrasType",
    "BattingEntry",
    "BowlingEntry",
    "Innings",
    "MatchInfo",
    "LiveState",
    "BallEvent",
    "ScorecardData",
    "Dismissal",
    "Delivery",
    "PendingWicket",
    "NormalDelivery",
    "WideDelivery",
    "NoBallDelivery",
    "ByeDelivery",
    "LegByeDelivery",
    "parse_delivery",
    "delivery_from_flags",
    "Command",
    "parse_commands",
    "MatchCreate",
    "MatchResponse",
    "PlayerCreate",
    "PlayerResponse",
    "RosterPlayer",
    "Side",
    "PlayerCareerStatsResponse",
]
