"""Roster providers: the players each side can select in a match."""

from typing import Dict, Iterable, List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..database import get_session
from ..engine.errors import PersistenceError
from ..models import Match, Player
from ..schemas.players import PlayerCreate, PlayerResponse, RosterPlayer, Side


def opponent_player_id(index: int, name: str) -> str:
    return f"opp-{index}-{name}"


class StaticRosterProvider:
    """Roster held in memory, for tools and tests."""

    def __init__(self, home: Iterable[RosterPlayer] = (), away: Iterable[RosterPlayer] = ()):
        self._players: Dict[Side, List[RosterPlayer]] = {
            Side.HOME: list(home),
            Side.AWAY: list(away),
        }

    def players_for(self, side: Side) -> List[RosterPlayer]:
        return list(self._players[Side(side)])


class DatabaseRosterProvider:
    """Resolves a match's squads against the players table.

    The home side is the match squad (player ids) in squad order, or every
    active player when no squad was picked. The away side is the opponent's
    name list with synthetic ``opp-{i}-{name}`` ids.
    """

    def __init__(self, match_id):
        self.match_id = int(match_id)
        self._cache: Dict[Side, List[RosterPlayer]] = {}

    def players_for(self, side: Side) -> List[RosterPlayer]:
        side = Side(side)
        if side not in self._cache:
            self._cache[side] = self._load(side)
        return list(self._cache[side])

    def _load(self, side: Side) -> List[RosterPlayer]:
        try:
            with get_session() as session:
                match = session.get(Match, self.match_id)
                if match is None:
                    raise PersistenceError(f"Match {self.match_id} not found")

                if side == Side.AWAY:
                    return [
                        RosterPlayer(id=opponent_player_id(i, name), name=name)
                        for i, name in enumerate(match.opponent_squad or [])
                    ]

                squad_ids = [int(pid) for pid in (match.squad or []) if str(pid).isdigit()]
                if squad_ids:
                    rows = session.execute(select(Player).where(Player.id.in_(squad_ids))).scalars().all()
                    by_id = {p.id: p for p in rows}
                    missing = [pid for pid in squad_ids if pid not in by_id]
                    if missing:
                        logger.warning(f"Match {self.match_id}: squad ids not found: {missing}")
                    players = [by_id[pid] for pid in squad_ids if pid in by_id]
                else:
                    players = session.execute(
                        select(Player).where(Player.is_active.is_(True)).order_by(Player.name)
                    ).scalars().all()

                return [RosterPlayer(id=str(p.id), name=p.name) for p in players]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load {side.value} roster for match {self.match_id}: {e}")
            raise PersistenceError(f"Could not load roster: {e}") from e


def create_player(data: PlayerCreate) -> PlayerResponse:
    """Add a player to the home roster."""
    try:
        with get_session() as session:
            player = Player(**data.model_dump())
            session.add(player)
            session.flush()
            logger.info(f"Created player {player.name} (id={player.id})")
            return PlayerResponse.model_validate(player)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create player {data.name}: {e}")
        raise PersistenceError(f"Could not create player: {e}") from e


def list_players(active_only: bool = False) -> List[PlayerResponse]:
    with get_session() as session:
        query = select(Player).order_by(Player.id)
        if active_only:
            query = query.where(Player.is_active.is_(True))
        return [PlayerResponse.model_validate(p) for p in session.execute(query).scalars().all()]


def find_player(session, player_id: Optional[str], name: Optional[str]) -> Optional[Player]:
    """Match a scorecard entry to a player row, by id first and then by name."""
    if player_id and str(player_id).isdigit():
        player = session.get(Player, int(player_id))
        if player is not None:
            return player
    if name:
        return session.execute(select(Player).where(Player.name == name)).scalars().first()
    return None
