"""Exceptions raised by the scoring engine and its collaborators."""

from typing import Iterable, List


class ScoringError(Exception):
    """Base class for scoring engine errors."""
    pass


class MissingPlayersError(ScoringError):
    """A delivery was attempted while required players are unresolved."""

    def __init__(self, roles: Iterable[str]):
        self.roles: List[str] = list(roles)
        super().__init__(
            "Action blocked, missing active players: " + ", ".join(self.roles)
        )


class SelectionError(ScoringError):
    """A player selection broke a selection rule."""
    pass


class InningsClosedError(ScoringError):
    """The innings or match being scored is already complete."""
    pass


class PersistenceError(ScoringError):
    """Saving or loading match data failed."""
    pass


class SaveInProgressError(ScoringError):
    """A mutation was attempted while a save is outstanding."""
    pass


class StatsAlreadyAppliedError(ScoringError):
    """Career statistics for this match were already folded in."""
    pass
