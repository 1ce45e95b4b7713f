import pytest

from cricket_scoring.database import configure_engine, create_tables, drop_tables
from cricket_scoring.engine import MatchSession
from cricket_scoring.persistence import StaticRosterProvider
from cricket_scoring.schemas import (
    BattingEntry,
    BowlingEntry,
    Innings,
    LiveState,
    MatchInfo,
    RosterPlayer,
)

HOME_PLAYERS = [RosterPlayer(id=f"h{i}", name=f"Home Player {i}") for i in range(1, 12)]
AWAY_PLAYERS = [RosterPlayer(id=f"a{i}", name=f"Away Player {i}") for i in range(1, 12)]


@pytest.fixture
def innings():
    """Innings with a striker, non-striker and bowler ready to go."""
    return Innings(
        batting=[
            BattingEntry(id="s", name="Striker"),
            BattingEntry(id="n", name="Non Striker"),
        ],
        bowling=[BowlingEntry(id="b", name="Bowler")],
    )


@pytest.fixture
def live():
    return LiveState(striker_id="s", non_striker_id="n", bowler_id="b")


@pytest.fixture
def match_info():
    return MatchInfo(id="1", team_a_name="Home XI", team_b_name="Visitors", total_overs=20)


@pytest.fixture
def roster():
    return StaticRosterProvider(HOME_PLAYERS, AWAY_PLAYERS)


@pytest.fixture
def session(match_info, roster):
    return MatchSession.new(match_info, roster=roster)


@pytest.fixture
def ready_session(session):
    """Session with openers and a bowler selected in the first innings."""
    session.select_striker("h1")
    session.select_non_striker("h2")
    session.select_bowler("a1")
    return session


@pytest.fixture
def db():
    """Fresh in-memory database for each test."""
    configure_engine("sqlite://")
    create_tables()
    yield
    drop_tables()
