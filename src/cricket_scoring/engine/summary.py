"""Views derived from the ball log and scorecard.

The ball log is the canonical history, so totals and the current partnership
can be rebuilt from it without touching the aggregated entries.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..schemas.scorecard import BallEvent, ExtrasType, ScorecardData
from .overs import legal_balls_to_overs


@dataclass
class LogTotals:
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0

    @property
    def overs(self) -> float:
        return legal_balls_to_overs(self.legal_balls)


@dataclass
class BatterShare:
    name: str
    runs: int = 0
    balls: int = 0


@dataclass
class Partnership:
    runs: int
    balls: int
    batter1: BatterShare
    batter2: BatterShare


@dataclass
class Performer:
    name: str
    points: int


def innings_log(ball_log: List[BallEvent], innings_index: int) -> List[BallEvent]:
    return [e for e in ball_log if e.inning == innings_index]


def totals_from_log(ball_log: List[BallEvent], innings_index: int) -> LogTotals:
    """Rebuild runs, wickets and legal balls of one innings from the log."""
    totals = LogTotals()
    for event in innings_log(ball_log, innings_index):
        totals.runs += event.total_runs
        if event.is_legal:
            totals.legal_balls += 1
        if event.is_wicket and (event.dismissal is None or event.dismissal.is_dismissal):
            totals.wickets += 1
    return totals


def current_partnership(scorecard: ScorecardData, innings_index: Optional[int] = None) -> Optional[Partnership]:
    """Partnership between the two batters at the crease, since the last wicket.

    Returns ``None`` unless both batting slots are filled.
    """
    if innings_index is None:
        innings_index = scorecard.current_innings
    live = scorecard.live_state
    innings = scorecard.innings[innings_index]
    striker = innings.find_batter(live.striker_id)
    non_striker = innings.find_batter(live.non_striker_id)
    if striker is None or non_striker is None:
        return None

    events = innings_log(scorecard.ball_log, innings_index)
    last_wicket = max((i for i, e in enumerate(events) if e.is_wicket), default=-1)
    stand = events[last_wicket + 1:]

    shares = {name: BatterShare(name) for name in (striker.name, non_striker.name)}
    for event in stand:
        share = shares.get(event.striker)
        if share is None:
            continue
        share.runs += event.runs
        if event.extras_type != ExtrasType.WIDE:
            share.balls += 1

    return Partnership(
        runs=sum(e.total_runs for e in stand),
        balls=sum(1 for e in stand if e.is_legal),
        batter1=shares[striker.name],
        batter2=shares[non_striker.name],
    )


def top_performers(scorecard: ScorecardData, limit: int = 5) -> List[Performer]:
    """Player-of-the-match candidates ranked by fantasy points.

    A run is worth 1 point with 10 bonus points at 50 and 10 more at 100.
    A wicket is worth 20 points with a 20 point bonus for five or more.
    """
    points: Dict[str, int] = {}
    for innings in scorecard.innings:
        for batter in innings.batting:
            pts = batter.runs
            if batter.runs >= 50:
                pts += 10
            if batter.runs >= 100:
                pts += 10
            points[batter.name] = points.get(batter.name, 0) + pts
        for bowler in innings.bowling:
            pts = bowler.wickets * 20
            if bowler.wickets >= 5:
                pts += 20
            points[bowler.name] = points.get(bowler.name, 0) + pts

    ranked = sorted(points.items(), key=lambda item: item[1], reverse=True)
    return [Performer(name, pts) for name, pts in ranked[:limit]]
