from cricket_scoring.engine import MilestoneType, detect_milestones
from cricket_scoring.schemas import BattingEntry, BowlingEntry


def batter(runs, balls=30):
    return BattingEntry(id="1", name="Batter", runs=runs, balls=balls, fours=4, sixes=1)


def bowler(wickets, runs=20, overs=3.0):
    return BowlingEntry(id="2", name="Bowler", wickets=wickets, runs=runs, overs=overs)


def types(milestones):
    return [m.type for m in milestones]


def test_nothing_to_report():
    assert detect_milestones(10, batter(12), 1, bowler(1)) == []


def test_fifty():
    (fifty,) = detect_milestones(48, batter(52, balls=40), 0, bowler(0))
    assert fifty.type == MilestoneType.FIFTY
    assert fifty.title == "HALF CENTURY"
    assert (fifty.value1, fifty.value2, fifty.value3, fifty.value4) == (52, 40, 4, 1)


def test_century_only_when_crossing_hundred():
    assert types(detect_milestones(98, batter(102), 0, bowler(0))) == [MilestoneType.HUNDRED]
    assert types(detect_milestones(101, batter(105), 0, bowler(0))) == []


def test_wicket_hauls_fire_on_exact_count():
    three = detect_milestones(0, batter(0), 2, bowler(3, runs=18, overs=3.2))
    assert types(three) == [MilestoneType.THREE_WICKETS]
    assert (three[0].label3, three[0].value3) == ("Overs", 3.2)

    assert types(detect_milestones(0, batter(0), 4, bowler(5))) == [MilestoneType.FIVE_WICKETS]
    assert types(detect_milestones(0, batter(0), 3, bowler(4))) == []


def test_wicket_milestone_fires_alongside_haul():
    result = detect_milestones(7, batter(7, balls=9), 4, bowler(5), is_wicket=True)
    assert types(result) == [MilestoneType.WICKET, MilestoneType.FIVE_WICKETS]
    assert result[0].sub_text == "Departing for 7 (9)"
    assert result[0].title == "WICKET!"
