"""Non-blocking consistency checks run after every scorecard mutation."""

import logging
from dataclasses import dataclass, field
from typing import List

from ..schemas.scorecard import ScorecardData
from .overs import overs_to_legal_balls
from .phase import MAX_WICKETS
from .summary import innings_log, totals_from_log

logger = logging.getLogger(__name__)

INNINGS_LABELS = ("1st Innings", "2nd Innings")


@dataclass
class ValidationIssue:
    type: str
    innings: int
    message: str


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> List[str]:
        return [issue.message for issue in self.issues]


class ScorecardValidator:
    """Cross-checks aggregated totals against bowler figures and the ball log."""

    def validate(self, scorecard: ScorecardData) -> ValidationResult:
        result = ValidationResult()
        for index, innings in enumerate(scorecard.innings):
            label = INNINGS_LABELS[index]

            credited = sum(b.wickets for b in innings.bowling)
            if credited > innings.wickets:
                result.issues.append(ValidationIssue(
                    "bowler_wickets_exceed_fallen", index,
                    f"{label}: Bowlers credited with {credited} wickets, but only {innings.wickets} fell.",
                ))

            if innings.wickets > MAX_WICKETS:
                result.issues.append(ValidationIssue(
                    "wickets_exceed_limit", index,
                    f"{label}: {innings.wickets} wickets recorded, maximum is {MAX_WICKETS}.",
                ))

            total_overs = scorecard.match_info.total_overs
            if overs_to_legal_balls(innings.overs) > total_overs * 6:
                result.issues.append(ValidationIssue(
                    "overs_exceed_limit", index,
                    f"{label}: {innings.overs} overs bowled in a {total_overs} over match.",
                ))

            if innings_log(scorecard.ball_log, index):
                result.issues.extend(self._check_ball_log(scorecard, index))

        if result.issues:
            logger.warning(f"Scorecard validation found {len(result.issues)} issue(s)")
        return result

    def _check_ball_log(self, scorecard: ScorecardData, index: int) -> List[ValidationIssue]:
        innings = scorecard.innings[index]
        logged = totals_from_log(scorecard.ball_log, index)
        problems = []
        if logged.runs != innings.total_runs:
            problems.append(f"runs {logged.runs} vs {innings.total_runs}")
        if logged.wickets != innings.wickets:
            problems.append(f"wickets {logged.wickets} vs {innings.wickets}")
        if logged.legal_balls != overs_to_legal_balls(innings.overs):
            problems.append(f"overs {logged.overs} vs {innings.overs}")

        if not problems:
            return []
        return [ValidationIssue(
            "ball_log_mismatch", index,
            f"{INNINGS_LABELS[index]}: Ball log disagrees with scorecard ({'; '.join(problems)}).",
        )]
