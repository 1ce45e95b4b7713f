"""Innings totals derived from raw batting and bowling entries."""

from ..schemas.scorecard import Innings, ScorecardData
from .overs import legal_balls_to_overs, overs_to_legal_balls


def calculate_innings_totals(innings: Innings) -> Innings:
    """Return a copy of ``innings`` with extras, total, wickets and overs recomputed.

    Pure and idempotent: only the raw entries and ``bye_runs`` are read, so
    applying it twice gives the same result as applying it once.
    """
    extras = (
        sum(b.wides for b in innings.bowling)
        + sum(b.no_balls for b in innings.bowling)
        + sum(b.leg_byes for b in innings.bowling)
        + innings.bye_runs
    )
    batter_runs = sum(b.runs for b in innings.batting)
    wickets = sum(1 for b in innings.batting if b.is_out)
    legal_balls = sum(overs_to_legal_balls(b.overs) for b in innings.bowling)

    return innings.model_copy(
        deep=True,
        update={
            "extras": extras,
            "total_runs": batter_runs + extras,
            "wickets": wickets,
            "overs": legal_balls_to_overs(legal_balls),
        },
    )


def aggregate_scorecard(scorecard: ScorecardData) -> ScorecardData:
    """Recompute derived totals for both innings."""
    return scorecard.model_copy(
        update={"innings": [calculate_innings_totals(i) for i in scorecard.innings]}
    )
