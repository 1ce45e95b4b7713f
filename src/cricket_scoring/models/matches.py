"""Match model for the scoring database."""

from enum import Enum

from sqlalchemy import Column, String, Integer, Date, Boolean, JSON, Index, Enum as SQLEnum

from .base import Base


class MatchResult(str, Enum):
    """Match result from the home side's point of view."""
    PENDING = "Pending"
    WON = "Won"
    LOST = "Lost"
    DRAW = "Draw"
    TIE = "Tie"
    NO_RESULT = "No Result"


class Match(Base):
    """Fixture record owned by the surrounding application.

    The scoring engine only reads the squad lists and the stored scorecard
    blob, and writes back the result, status and blob.
    """

    __tablename__ = "matches"

    # Fixture details
    opponent = Column(String(100), nullable=False, index=True)
    match_date = Column(Date, nullable=True, index=True)
    venue = Column(String(200), nullable=True)
    tournament = Column(String(200), nullable=True, index=True)
    total_overs = Column(Integer, nullable=True)

    # Result and status
    result = Column(
        SQLEnum(MatchResult, values_callable=lambda e: [m.value for m in e]),
        default=MatchResult.PENDING,
        nullable=False,
        index=True,
    )
    is_upcoming = Column(Boolean, default=True, nullable=False, index=True)
    stats_updated = Column(Boolean, default=False, nullable=False)

    # Squads: player ids for the home side, plain names for the opponent
    squad = Column(JSON, nullable=True)
    opponent_squad = Column(JSON, nullable=True)

    # Full engine state blob
    scorecard_data = Column(JSON, nullable=True)

    # Indexes for common queries
    __table_args__ = (
        Index("idx_match_result_upcoming", "result", "is_upcoming"),
    )

    @property
    def is_completed(self) -> bool:
        """Check if match has a final result."""
        return self.result != MatchResult.PENDING

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, vs {self.opponent}, {self.match_date}, {self.result.value if self.result else 'Pending'})>"
