"""Database-backed collaborators of the scoring engine."""

from .roster import DatabaseRosterProvider, StaticRosterProvider, create_player, list_players
from .match_store import MatchStore
from .career_stats import CareerStatsService

__all__ = [
    "DatabaseRosterProvider",
    "StaticRosterProvider",
    "create_player",
    "list_players",
    "MatchStore",
    "CareerStatsService",
]
