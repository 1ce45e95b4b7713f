import asyncio

import pytest
from pydantic import ValidationError

from cricket_scoring.engine import (
    InningsClosedError,
    MatchSession,
    MissingPlayersError,
    PersistenceError,
    PhaseEvent,
    PlayerRole,
    SaveInProgressError,
    ScoringError,
    SelectionError,
)
from cricket_scoring.models import MatchResult
from cricket_scoring.schemas import (
    DismissalKind,
    MatchInfo,
    NormalDelivery,
    ScorecardData,
    WideDelivery,
    parse_commands,
)


def bowl_over(session, runs=0):
    outcomes = [session.score(NormalDelivery(runs=runs)) for _ in range(6)]
    return outcomes[-1]


class SlowStore:
    """Store whose save blocks until released."""

    def __init__(self):
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.saved = []

    async def save(self, match_id, scorecard):
        self.started.set()
        await self.release.wait()
        self.saved.append((match_id, scorecard))


class FailingStore:
    async def save(self, match_id, scorecard):
        raise PersistenceError("database unavailable")


def test_selection_order(session):
    assert session.next_selection() == PlayerRole.STRIKER
    session.select_striker("h1")
    assert session.next_selection() == PlayerRole.NON_STRIKER
    session.select_non_striker("h2")
    assert session.next_selection() == PlayerRole.BOWLER
    session.select_bowler("a1")
    assert session.next_selection() is None

    assert [b.name for b in session.innings.batting] == ["Home Player 1", "Home Player 2"]
    assert session.innings.bowling[0].name == "Away Player 1"


def test_striker_and_non_striker_must_differ(session):
    session.select_striker("h1")
    with pytest.raises(SelectionError):
        session.select_non_striker("h1")


def test_player_must_come_from_batting_side(session):
    with pytest.raises(SelectionError):
        session.select_striker("a1")
    session.select_striker("sub", name="Substitute")
    assert session.innings.find_batter("sub").name == "Substitute"


def test_dismissed_batter_cannot_return(ready_session):
    ready_session.score(NormalDelivery(dismissal={"kind": "Bowled"}))
    with pytest.raises(SelectionError):
        ready_session.select_striker("h1")


def test_retired_hurt_batter_can_return(ready_session):
    ready_session.update_batting_entry(0, "h1", how_out=DismissalKind.RETIRED_HURT)
    ready_session.select_striker("h3")
    ready_session.select_striker("h1")
    assert ready_session.innings.find_batter("h1").how_out == DismissalKind.NOT_OUT


def test_undo_restores_identical_state(ready_session):
    before = ready_session.data.model_dump()
    ready_session.score(NormalDelivery(runs=4))
    ready_session.score(WideDelivery(runs=1))
    ready_session.score(NormalDelivery(runs=1))
    ready_session.score(NormalDelivery(dismissal={"kind": "LBW"}))

    for _ in range(4):
        assert ready_session.undo()
    assert ready_session.data.model_dump() == before
    assert not ready_session.undo()


def test_blocked_delivery_changes_nothing(session):
    session.select_striker("h1")
    before = session.data.model_dump()
    with pytest.raises(MissingPlayersError):
        session.score(NormalDelivery(runs=1))
    assert session.data.model_dump() == before
    assert session.history.depth == 0


def test_over_complete_phase(ready_session):
    outcome = bowl_over(ready_session, runs=0)
    assert outcome.phase == PhaseEvent.OVER_COMPLETE
    assert ready_session.innings.bowling[0].maidens == 1
    assert ready_session.next_selection() == PlayerRole.BOWLER
    assert ready_session.live.striker_id == "h2"


def test_pending_wicket_flow(ready_session):
    ready_session.begin_wicket()
    with pytest.raises(ScoringError):
        ready_session.score(NormalDelivery())

    outcome = ready_session.confirm_wicket(DismissalKind.CAUGHT, "Away Player 5")
    assert outcome.is_wicket
    assert ready_session.pending_wicket is None
    assert ready_session.innings.find_batter("h1").fielder == "Away Player 5"
    assert ready_session.next_selection() == PlayerRole.STRIKER


def test_invalid_confirm_keeps_pending_wicket(ready_session):
    ready_session.begin_wicket(WideDelivery())
    with pytest.raises(ValidationError):
        ready_session.confirm_wicket("Caught")
    assert ready_session.pending_wicket is not None

    ready_session.cancel_wicket()
    assert ready_session.pending_wicket is None
    assert ready_session.data.ball_log == []


def test_toss_sets_batting_order(session):
    session.record_toss(winner_is_home=True, decision="bowl")
    assert session.match_info.toss_result == "Home XI won the toss and elected to bowl"
    assert not session.match_info.home_bats_first
    with pytest.raises(SelectionError):
        session.select_striker("h1")
    session.select_striker("a1")


def test_chase_cannot_start_early(ready_session):
    ready_session.score(NormalDelivery(runs=1))
    with pytest.raises(ScoringError):
        ready_session.start_second_innings()


def test_manual_target_allows_early_chase(ready_session):
    ready_session.set_target(40)
    assert ready_session.start_second_innings() == 40
    assert ready_session.current_innings == 1
    assert ready_session.live.striker_id is None


def test_full_match():
    info = MatchInfo(id="7", team_a_name="Home XI", team_b_name="Visitors", total_overs=1)
    session = MatchSession.new(info)
    session.select_striker("h1", name="Opener One")
    session.select_non_striker("h2", name="Opener Two")
    session.select_bowler("a1", name="Quick")

    outcome = bowl_over(session, runs=2)
    assert outcome.phase == PhaseEvent.INNINGS_BREAK
    with pytest.raises(InningsClosedError):
        session.score(NormalDelivery())

    assert session.start_second_innings() == 13
    session.select_striker("a2", name="Chaser One")
    session.select_non_striker("a3", name="Chaser Two")
    session.select_bowler("h5", name="Spinner")
    session.score(NormalDelivery(runs=6))
    outcome = session.score(NormalDelivery(runs=6))
    assert outcome.phase is None
    outcome = session.score(WideDelivery())
    assert outcome.phase == PhaseEvent.MATCH_COMPLETE

    result = session.finalize(player_of_match="Chaser One")
    assert result.result_type == MatchResult.LOST
    assert result.result_text == "Visitors won by 10 wickets"
    assert session.match_info.match_result == "Visitors won by 10 wickets"
    assert session.match_info.player_of_match == "Chaser One"
    assert not session.can_undo
    with pytest.raises(InningsClosedError):
        session.score(NormalDelivery())


def test_finalize_requires_complete_match(ready_session):
    with pytest.raises(ScoringError):
        ready_session.finalize()


def test_no_result(ready_session):
    ready_session.score(NormalDelivery(runs=1))
    ready_session.declare_no_result()
    assert ready_session.match_info.result_type == MatchResult.NO_RESULT
    assert ready_session.is_finalized
    assert ready_session.next_selection() is None


def test_remove_entry_clears_live_slot(ready_session):
    ready_session.remove_entry(0, "a1", role="bowling")
    assert ready_session.live.bowler_id is None
    assert ready_session.innings.bowling == []
    with pytest.raises(SelectionError):
        ready_session.remove_entry(0, "nobody")


def test_set_bye_runs(ready_session):
    ready_session.set_bye_runs(0, 3)
    assert ready_session.innings.extras == 3
    assert ready_session.innings.total_runs == 3


def test_partnership(ready_session):
    ready_session.score(NormalDelivery(runs=4))
    ready_session.score(NormalDelivery(runs=1))
    ready_session.score(WideDelivery())
    ready_session.score(NormalDelivery(runs=2))

    stand = ready_session.partnership()
    assert (stand.runs, stand.balls) == (8, 3)
    assert stand.batter1.name == "Home Player 2"
    assert (stand.batter1.runs, stand.batter1.balls) == (2, 1)
    assert (stand.batter2.runs, stand.batter2.balls) == (5, 2)


def test_partnership_resets_after_wicket(ready_session):
    ready_session.score(NormalDelivery(runs=4))
    ready_session.score(NormalDelivery(dismissal={"kind": "Bowled"}))
    assert ready_session.partnership() is None
    ready_session.select_striker("h3")
    stand = ready_session.partnership()
    assert (stand.runs, stand.balls) == (0, 0)


def test_top_performers(ready_session):
    ready_session.update_batting_entry(0, "h1", runs=55)
    ready_session.update_bowling_entry(0, "a1", wickets=5)
    top = ready_session.top_performers()
    assert [(p.name, p.points) for p in top[:2]] == [("Away Player 1", 120), ("Home Player 1", 65)]


def test_execute_commands(session):
    commands = parse_commands([
        {"action": "select_striker", "player_id": "h1"},
        {"action": "select_non_striker", "player_id": "h2"},
        {"action": "select_bowler", "player_id": "a1"},
        {"action": "ball", "delivery": {"kind": "normal", "runs": 4}},
        {"action": "ball", "delivery": {"kind": "no_ball", "runs": 1}},
        {"action": "begin_wicket", "delivery": {"kind": "normal"}},
        {"action": "confirm_wicket", "kind": "Stumped", "fielder": "Keeper"},
        {"action": "undo"},
    ])
    results = [session.execute(c) for c in commands]
    assert results[-1] is True
    assert session.innings.total_runs == 6
    assert session.live.striker_id == "h2"


def test_scorecard_blob_uses_camel_case(ready_session):
    ready_session.score(NormalDelivery(runs=1))
    blob = ready_session.data.to_blob()
    assert set(blob) == {"matchInfo", "innings", "ballLog", "liveState", "currentInnings"}
    assert blob["liveState"]["strikerId"] == "h2"
    assert blob["innings"][0]["bowling"][0]["noBalls"] == 0
    assert ScorecardData.from_blob(blob) == ready_session.data


def test_mutations_blocked_while_saving(ready_session):
    store = SlowStore()

    async def scenario():
        save = asyncio.create_task(ready_session.save(store))
        await store.started.wait()
        assert ready_session.is_saving
        with pytest.raises(SaveInProgressError):
            ready_session.score(NormalDelivery(runs=1))
        with pytest.raises(SaveInProgressError):
            ready_session.undo()
        with pytest.raises(SaveInProgressError):
            await ready_session.save(store)
        store.release.set()
        await save

    asyncio.run(scenario())
    assert not ready_session.is_saving
    assert store.saved[0][0] == "1"
    ready_session.score(NormalDelivery(runs=1))


def test_failed_save_keeps_state(ready_session):
    ready_session.score(NormalDelivery(runs=2))
    with pytest.raises(PersistenceError):
        asyncio.run(ready_session.save(FailingStore()))
    assert ready_session.innings.total_runs == 2
    assert not ready_session.is_saving
    assert ready_session.can_undo


def test_delivery_needs_non_striker(session):
    session.select_striker("h1")
    session.select_bowler("a1")
    with pytest.raises(MissingPlayersError) as exc:
        session.score(NormalDelivery(runs=1))
    assert exc.value.roles == ["Non-Striker (Not Selected)"]
    assert session.live.striker_id == "h1"
    assert session.data.ball_log == []
    assert session.next_selection() == PlayerRole.NON_STRIKER


def finished_match():
    info = MatchInfo(id="9", team_a_name="Home XI", team_b_name="Visitors", total_overs=1)
    session = MatchSession.new(info)
    session.select_striker("h1", name="Opener One")
    session.select_non_striker("h2", name="Opener Two")
    session.select_bowler("a1", name="Quick")
    bowl_over(session, runs=0)
    session.start_second_innings()
    session.select_striker("a2", name="Chaser One")
    session.select_non_striker("a3", name="Chaser Two")
    session.select_bowler("h5", name="Spinner")
    session.score(NormalDelivery(runs=1))
    session.finalize()
    return session


def abandoned_match(ready_session):
    ready_session.score(NormalDelivery(runs=1))
    ready_session.declare_no_result()
    return ready_session


CORRECTIONS = [
    lambda s: s.update_batting_entry(0, "h1", runs=99),
    lambda s: s.update_bowling_entry(0, "a1", wickets=3),
    lambda s: s.remove_entry(0, "h1"),
    lambda s: s.set_bye_runs(0, 4),
]


@pytest.mark.parametrize("correction", CORRECTIONS)
def test_corrections_blocked_after_finalize(correction):
    session = finished_match()
    before = session.data.model_dump()
    with pytest.raises(InningsClosedError):
        correction(session)
    assert session.data.model_dump() == before


@pytest.mark.parametrize("correction", CORRECTIONS)
def test_corrections_blocked_after_no_result(ready_session, correction):
    session = abandoned_match(ready_session)
    before = session.data.model_dump()
    with pytest.raises(InningsClosedError):
        correction(session)
    assert session.data.model_dump() == before
