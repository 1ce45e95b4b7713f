"""Player-stats sink: folds a completed match into career aggregates."""

from typing import Dict, Optional, Tuple

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_session
from ..engine.errors import PersistenceError, StatsAlreadyAppliedError
from ..engine.overs import overs_to_legal_balls
from ..models import Match, Player, PlayerCareerStats
from ..schemas.player_stats import PlayerCareerStatsResponse
from ..schemas.scorecard import BattingEntry, BowlingEntry, DismissalKind, ScorecardData
from .roster import find_player


def _score_key(score: str) -> Tuple[int, bool]:
    """Sort key for a high score string such as ``"57*"``."""
    not_out = score.endswith("*")
    digits = score.rstrip("*")
    return (int(digits) if digits.isdigit() else 0, not_out)


def _figures_key(figures: str) -> Tuple[int, int]:
    """Sort key for bowling figures ``"W/R"``: more wickets, then fewer runs."""
    try:
        wickets, runs = (int(part) for part in figures.split("/"))
    except ValueError:
        return (0, 0)
    return (wickets, -runs)


def _new_career_stats(player: Player) -> PlayerCareerStats:
    return PlayerCareerStats(
        player_id=player.id,
        matches=0, innings_batted=0, not_outs=0, runs=0, balls_faced=0,
        fours=0, sixes=0, fifties=0, hundreds=0, ducks=0, highest_score="0",
        innings_bowled=0, balls_bowled=0, maidens=0, runs_conceded=0,
        wickets=0, four_wickets=0, five_wickets=0, best_bowling="0/0",
    )


def fold_batting(stats: PlayerCareerStats, entry: BattingEntry) -> None:
    if entry.how_out == DismissalKind.DID_NOT_BAT:
        return
    not_out = not entry.is_out
    stats.innings_batted += 1
    stats.not_outs += 1 if not_out else 0
    stats.runs += entry.runs
    stats.balls_faced += entry.balls
    stats.fours += entry.fours
    stats.sixes += entry.sixes
    if entry.runs >= 100:
        stats.hundreds += 1
    elif entry.runs >= 50:
        stats.fifties += 1
    if entry.is_out and entry.runs == 0:
        stats.ducks += 1

    score = f"{entry.runs}*" if not_out else str(entry.runs)
    if _score_key(score) > _score_key(stats.highest_score or "0"):
        stats.highest_score = score


def fold_bowling(stats: PlayerCareerStats, entry: BowlingEntry) -> None:
    balls = overs_to_legal_balls(entry.overs)
    if balls == 0 and entry.runs == 0 and entry.wickets == 0:
        return
    first_spell = stats.innings_bowled == 0
    stats.innings_bowled += 1
    stats.balls_bowled += balls
    stats.maidens += entry.maidens
    stats.runs_conceded += entry.runs
    stats.wickets += entry.wickets
    if entry.wickets >= 5:
        stats.five_wickets += 1
    elif entry.wickets == 4:
        stats.four_wickets += 1

    figures = f"{entry.wickets}/{entry.runs}"
    if first_spell or _figures_key(figures) > _figures_key(stats.best_bowling or "0/0"):
        stats.best_bowling = figures


class CareerStatsService:
    """Applies a finished scorecard to ``player_career_stats`` exactly once."""

    async def apply_match(self, match_id, scorecard: ScorecardData) -> int:
        """Fold every home player's figures into their career row.

        Runs in one transaction. Raises ``StatsAlreadyAppliedError`` without
        touching anything if the match was already applied. Returns the
        number of players updated.
        """
        try:
            with get_session() as session:
                match = session.get(Match, int(match_id))
                if match is None:
                    raise PersistenceError(f"Match {match_id} not found")
                if match.stats_updated:
                    raise StatsAlreadyAppliedError(f"Career stats for match {match_id} were already applied")

                updated = self._apply(session, scorecard)
                match.stats_updated = True
        except SQLAlchemyError as e:
            logger.error(f"Failed to apply career stats for match {match_id}: {e}")
            raise PersistenceError(f"Could not apply career stats: {e}") from e

        logger.info(f"Applied career stats for match {match_id}: {updated} players updated")
        return updated

    def _apply(self, session: Session, scorecard: ScorecardData) -> int:
        info = scorecard.match_info
        batting_index = 0 if info.home_bats_first else 1
        home_batting = scorecard.innings[batting_index].batting
        home_bowling = scorecard.innings[1 - batting_index].bowling

        rows: Dict[int, PlayerCareerStats] = {}

        def stats_for(player_id: Optional[str], name: Optional[str]) -> Optional[PlayerCareerStats]:
            player = find_player(session, player_id, name)
            if player is None:
                logger.warning(f"No player record for {name or player_id}, skipping")
                return None
            if player.id not in rows:
                stats = player.career_stats
                if stats is None:
                    stats = _new_career_stats(player)
                    session.add(stats)
                stats.matches += 1
                rows[player.id] = stats
            return rows[player.id]

        for pid in info.squad:
            stats_for(pid, None)
        for entry in home_batting:
            stats = stats_for(entry.id, entry.name)
            if stats is not None:
                fold_batting(stats, entry)
        for entry in home_bowling:
            stats = stats_for(entry.id, entry.name)
            if stats is not None:
                fold_bowling(stats, entry)

        return len(rows)

    async def get_career_stats(self, player_id: int) -> Optional[PlayerCareerStatsResponse]:
        with get_session() as session:
            stats = session.execute(
                select(PlayerCareerStats).where(PlayerCareerStats.player_id == player_id)
            ).scalars().first()
            if stats is None:
                return None
            return PlayerCareerStatsResponse.model_validate(stats)
