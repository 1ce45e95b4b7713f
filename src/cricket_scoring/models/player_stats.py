"""Player career statistics model."""

from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class PlayerCareerStats(Base):
    """Career aggregates folded in once per completed match."""

    __tablename__ = "player_career_stats"

    # Core reference
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, unique=True, index=True)

    # Batting career stats
    matches = Column(Integer, default=0, nullable=False)
    innings_batted = Column(Integer, default=0, nullable=False)
    not_outs = Column(Integer, default=0, nullable=False)
    runs = Column(Integer, default=0, nullable=False)
    balls_faced = Column(Integer, default=0, nullable=False)
    fours = Column(Integer, default=0, nullable=False)
    sixes = Column(Integer, default=0, nullable=False)
    fifties = Column(Integer, default=0, nullable=False)
    hundreds = Column(Integer, default=0, nullable=False)
    ducks = Column(Integer, default=0, nullable=False)
    highest_score = Column(String(10), default="0", nullable=False)  # "57*"

    # Bowling career stats (legal balls, not overs notation)
    innings_bowled = Column(Integer, default=0, nullable=False)
    balls_bowled = Column(Integer, default=0, nullable=False)
    maidens = Column(Integer, default=0, nullable=False)
    runs_conceded = Column(Integer, default=0, nullable=False)
    wickets = Column(Integer, default=0, nullable=False)
    four_wickets = Column(Integer, default=0, nullable=False)
    five_wickets = Column(Integer, default=0, nullable=False)
    best_bowling = Column(String(10), default="0/0", nullable=False)  # "5/20"

    player = relationship("Player", back_populates="career_stats")

    @property
    def batting_average(self) -> float:
        """Calculate batting average."""
        dismissals = self.innings_batted - self.not_outs
        return round(self.runs / dismissals, 2) if dismissals > 0 else 0.0

    @property
    def strike_rate(self) -> float:
        if self.balls_faced == 0:
            return 0.0
        return round(self.runs / self.balls_faced * 100, 2)

    @property
    def economy_rate(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return round(self.runs_conceded / (self.balls_bowled / 6), 2)

    def __repr__(self) -> str:
        return f"<PlayerCareerStats(player_id={self.player_id}, runs={self.runs}, wickets={self.wickets})>"
