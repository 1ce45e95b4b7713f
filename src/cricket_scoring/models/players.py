"""Player model for the scoring database."""

from sqlalchemy import Column, String, Boolean, Index
from sqlalchemy.orm import relationship

from .base import Base


class Player(Base):
    """Home squad player."""

    __tablename__ = "players"

    name = Column(String(100), nullable=False, index=True)
    role = Column(String(20), nullable=True, index=True)  # Batsman, Bowler, All-rounder, Wicket-keeper
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    career_stats = relationship("PlayerCareerStats", back_populates="player", uselist=False)

    __table_args__ = (
        Index("idx_player_active_name", "is_active", "name"),
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}')>"
