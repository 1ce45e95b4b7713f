"""Database models for the scoring engine's collaborators."""

from .base import Base
from .players import Player
from .matches import Match, MatchResult
from .player_stats import PlayerCareerStats

__all__ = [
    "Base",
    "Player",
    "Match",
    "MatchResult",
    "PlayerCareerStats",
]
