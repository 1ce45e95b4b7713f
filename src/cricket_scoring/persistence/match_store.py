"""Persistence sink for match scorecards."""

from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..database import get_session
from ..engine.errors import PersistenceError
from ..models import Match, MatchResult
from ..schemas.matches import MatchCreate, MatchResponse
from ..schemas.scorecard import MatchInfo, ScorecardData


class MatchStore:
    """Loads and saves the scorecard blob on the ``matches`` table.

    Methods are async so a session can guard against mutations while a save
    is outstanding; the database work itself runs on a sync session.
    """

    def __init__(self, home_team_name: Optional[str] = None):
        self.home_team_name = home_team_name or settings.scoring.home_team_name

    async def create_match(self, data: MatchCreate) -> MatchResponse:
        try:
            with get_session() as session:
                match = Match(
                    opponent=data.opponent,
                    match_date=data.match_date,
                    venue=data.venue,
                    tournament=data.tournament,
                    total_overs=data.total_overs or settings.scoring.default_total_overs,
                    squad=list(data.squad),
                    opponent_squad=list(data.opponent_squad),
                    result=MatchResult.PENDING,
                    is_upcoming=True,
                    stats_updated=False,
                )
                session.add(match)
                session.flush()
                logger.info(f"Created match {match.id} vs {match.opponent}")
                return MatchResponse.model_validate(match)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create match vs {data.opponent}: {e}")
            raise PersistenceError(f"Could not create match: {e}") from e

    async def get_match(self, match_id) -> MatchResponse:
        try:
            with get_session() as session:
                match = self._get(session, match_id)
                return MatchResponse.model_validate(match)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read match {match_id}: {e}") from e

    async def list_matches(self) -> list:
        with get_session() as session:
            rows = session.execute(select(Match).order_by(Match.id)).scalars().all()
            return [MatchResponse.model_validate(m) for m in rows]

    async def load(self, match_id) -> ScorecardData:
        """Restore the saved scorecard, or start a fresh one from the match record."""
        try:
            with get_session() as session:
                match = self._get(session, match_id)
                if match.scorecard_data:
                    logger.debug(f"Restoring saved scorecard for match {match.id}")
                    return ScorecardData.from_blob(match.scorecard_data)
                return ScorecardData(match_info=self._match_info(match))
        except SQLAlchemyError as e:
            logger.error(f"Failed to load match {match_id}: {e}")
            raise PersistenceError(f"Could not load match {match_id}: {e}") from e

    async def save(self, match_id, scorecard: ScorecardData) -> None:
        """Write the blob and the result fields derived from it."""
        info = scorecard.match_info
        try:
            with get_session() as session:
                match = self._get(session, match_id)
                match.scorecard_data = scorecard.to_blob()
                match.result = info.result_type
                match.is_upcoming = info.result_type == MatchResult.PENDING
                match.squad = list(info.squad)
                match.opponent_squad = list(info.opponent_squad)
            logger.info(f"Saved match {match_id} ({info.result_type.value})")
        except SQLAlchemyError as e:
            logger.error(f"Failed to save match {match_id}: {e}")
            raise PersistenceError(f"Could not save match {match_id}: {e}") from e

    def _get(self, session, match_id) -> Match:
        try:
            match = session.get(Match, int(match_id))
        except (TypeError, ValueError):
            match = None
        if match is None:
            raise PersistenceError(f"Match {match_id} not found")
        return match

    def _match_info(self, match: Match) -> MatchInfo:
        return MatchInfo(
            id=str(match.id),
            team_a_name=self.home_team_name,
            team_b_name=match.opponent,
            date=match.match_date.isoformat() if match.match_date else None,
            venue=match.venue or "",
            tournament=match.tournament or "",
            result_type=match.result or MatchResult.PENDING,
            squad=[str(pid) for pid in (match.squad or [])],
            opponent_squad=list(match.opponent_squad or []),
            total_overs=match.total_overs or settings.scoring.default_total_overs,
        )
