import asyncio

import pytest

from cricket_scoring.database import get_session
from cricket_scoring.engine import (
    MatchSession,
    PersistenceError,
    ScoringError,
    StatsAlreadyAppliedError,
)
from cricket_scoring.models import Match, MatchResult, PlayerCareerStats
from cricket_scoring.persistence import (
    CareerStatsService,
    DatabaseRosterProvider,
    MatchStore,
    create_player,
    list_players,
)
from cricket_scoring.persistence.career_stats import fold_batting, fold_bowling
from cricket_scoring.schemas import (
    BattingEntry,
    BowlingEntry,
    DismissalKind,
    MatchCreate,
    NormalDelivery,
    PlayerCreate,
    Side,
)


def add_players(*names):
    return [create_player(PlayerCreate(name=name)) for name in names]


def new_match(**kwargs):
    data = MatchCreate(opponent="Rivals CC", total_overs=1, **kwargs)
    return asyncio.run(MatchStore().create_match(data))


def play_one_over_match(match_id, players):
    """Home bats first for one over, visitors chase and fall short."""
    session = MatchSession(asyncio.run(MatchStore().load(match_id)), roster=DatabaseRosterProvider(match_id))
    session.select_striker(str(players[0].id))
    session.select_non_striker(str(players[1].id))
    session.select_bowler("opp-0-Rival One")
    for runs in (4, 0, 6, 0, 0, 2):
        session.score(NormalDelivery(runs=runs))

    session.start_second_innings()
    session.select_striker("opp-1-Rival Two")
    session.select_non_striker("opp-2-Rival Three")
    session.select_bowler(str(players[2].id))
    session.score(NormalDelivery(dismissal={"kind": "Bowled"}))
    session.select_striker("opp-0-Rival One")
    for _ in range(5):
        session.score(NormalDelivery(runs=1))
    session.finalize(player_of_match=players[0].name)
    return session


def test_create_and_list_players(db):
    add_players("Alice", "Bea")
    assert [p.name for p in list_players()] == ["Alice", "Bea"]


def test_load_fresh_scorecard_from_match(db):
    players = add_players("Alice", "Bea")
    match = new_match(squad=[str(p.id) for p in players], opponent_squad=["Rival One"])

    data = asyncio.run(MatchStore(home_team_name="Home XI").load(match.id))

    assert data.match_info.id == str(match.id)
    assert data.match_info.team_b_name == "Rivals CC"
    assert data.match_info.total_overs == 1
    assert data.match_info.squad == [str(p.id) for p in players]
    assert data.ball_log == []


def test_load_missing_match(db):
    with pytest.raises(PersistenceError):
        asyncio.run(MatchStore().load(999))


def test_save_and_restore(db):
    players = add_players("Alice", "Bea", "Cat")
    match = new_match(squad=[str(p.id) for p in players], opponent_squad=["Rival One", "Rival Two", "Rival Three"])

    session = play_one_over_match(match.id, players)
    asyncio.run(session.save(MatchStore()))

    restored = asyncio.run(MatchStore().load(match.id))
    assert restored == session.data

    with get_session() as db_session:
        row = db_session.get(Match, match.id)
        assert row.result == MatchResult.WON
        assert row.is_upcoming is False
        assert row.scorecard_data["matchInfo"]["matchResult"] == "Home XI won by 7 runs"


def test_home_roster_follows_squad_order(db):
    alice, bea, cat = add_players("Alice", "Bea", "Cat")
    match = new_match(squad=[str(cat.id), str(alice.id)])

    roster = DatabaseRosterProvider(match.id)
    assert [p.name for p in roster.players_for(Side.HOME)] == ["Cat", "Alice"]


def test_empty_squad_uses_active_players(db):
    add_players("Zed", "Amy")
    match = new_match()
    roster = DatabaseRosterProvider(match.id)
    assert [p.name for p in roster.players_for("home")] == ["Amy", "Zed"]


def test_away_roster_ids(db):
    match = new_match(opponent_squad=["Rival One", "Rival Two"])
    away = DatabaseRosterProvider(match.id).players_for(Side.AWAY)
    assert [p.id for p in away] == ["opp-0-Rival One", "opp-1-Rival Two"]


def test_apply_career_stats_once(db):
    players = add_players("Alice", "Bea", "Cat")
    match = new_match(squad=[str(p.id) for p in players], opponent_squad=["Rival One", "Rival Two", "Rival Three"])
    session = play_one_over_match(match.id, players)
    asyncio.run(session.save(MatchStore()))

    service = CareerStatsService()
    assert asyncio.run(session.apply_career_stats(service)) == 3

    alice = asyncio.run(service.get_career_stats(players[0].id))
    assert (alice.matches, alice.innings_batted, alice.runs, alice.balls_faced) == (1, 1, 12, 6)
    assert alice.highest_score == "12*"
    assert alice.not_outs == 1

    cat = asyncio.run(service.get_career_stats(players[2].id))
    assert (cat.innings_bowled, cat.balls_bowled, cat.wickets, cat.runs_conceded) == (1, 6, 1, 5)
    assert cat.best_bowling == "1/5"

    with pytest.raises(StatsAlreadyAppliedError):
        asyncio.run(session.apply_career_stats(service))

    with get_session() as db_session:
        rows = db_session.query(PlayerCareerStats).all()
        assert sorted(r.matches for r in rows) == [1, 1, 1]
        assert db_session.get(Match, match.id).stats_updated is True


def test_stats_need_finalized_match(db):
    match = new_match()
    session = MatchSession(asyncio.run(MatchStore().load(match.id)))
    with pytest.raises(ScoringError):
        asyncio.run(session.apply_career_stats(CareerStatsService()))


def test_fold_batting_tracks_milestones_and_ducks():
    stats = PlayerCareerStats(
        player_id=1, innings_batted=0, not_outs=0, runs=0, balls_faced=0, fours=0, sixes=0,
        fifties=0, hundreds=0, ducks=0, highest_score="0",
    )
    fold_batting(stats, BattingEntry(id="1", name="A", runs=57, balls=40, how_out=DismissalKind.CAUGHT))
    fold_batting(stats, BattingEntry(id="1", name="A", runs=0, balls=2, how_out=DismissalKind.BOWLED))
    fold_batting(stats, BattingEntry(id="1", name="A", runs=57, balls=30))
    fold_batting(stats, BattingEntry(id="1", name="A", how_out=DismissalKind.DID_NOT_BAT))

    assert (stats.innings_batted, stats.fifties, stats.ducks, stats.not_outs) == (3, 2, 1, 1)
    assert stats.highest_score == "57*"


def test_fold_bowling_best_figures():
    stats = PlayerCareerStats(
        player_id=1, innings_bowled=0, balls_bowled=0, maidens=0, runs_conceded=0, wickets=0,
        four_wickets=0, five_wickets=0, best_bowling="0/0",
    )
    fold_bowling(stats, BowlingEntry(id="1", name="A", overs=4.0, runs=30, wickets=0))
    assert stats.best_bowling == "0/30"
    fold_bowling(stats, BowlingEntry(id="1", name="A", overs=4.0, runs=20, wickets=4))
    fold_bowling(stats, BowlingEntry(id="1", name="A", overs=3.3, runs=15, wickets=4))
    fold_bowling(stats, BowlingEntry(id="1", name="A"))

    assert stats.best_bowling == "4/15"
    assert (stats.innings_bowled, stats.balls_bowled, stats.four_wickets) == (3, 69, 2)


def test_roster_is_read_once_per_provider(db):
    add_players("Amy")
    match = new_match()
    roster = DatabaseRosterProvider(match.id)
    assert [p.name for p in roster.players_for(Side.HOME)] == ["Amy"]

    add_players("Bea")
    assert [p.name for p in roster.players_for(Side.HOME)] == ["Amy"]
    assert [p.name for p in DatabaseRosterProvider(match.id).players_for(Side.HOME)] == ["Amy", "Bea"]
