"""Snapshot stack backing single-step undo."""

import logging
from collections import deque
from typing import Deque, List, Optional

from pydantic import BaseModel

from ..schemas.scorecard import BallEvent, LiveState, ScorecardData

logger = logging.getLogger(__name__)


class HistoryState(BaseModel):
    """Deep snapshot of the scorecard, ball log and live state."""

    scorecard: ScorecardData
    ball_log: List[BallEvent]
    live_state: LiveState

    def restore(self) -> ScorecardData:
        """Rebuild an independent scorecard from this snapshot."""
        return self.scorecard.model_copy(
            deep=True,
            update={
                "ball_log": [e.model_copy() for e in self.ball_log],
                "live_state": self.live_state.model_copy(),
            },
        )


class HistoryManager:
    """LIFO stack of snapshots. There is no redo."""

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth
        self._stack: Deque[HistoryState] = deque(maxlen=max_depth)

    def push(self, scorecard: ScorecardData, ball_log: List[BallEvent], live: LiveState) -> None:
        # The log and live state are stored once, outside the scorecard copy
        bare = scorecard.model_copy(update={"ball_log": [], "live_state": LiveState()})
        self._stack.append(HistoryState(
            scorecard=bare.model_copy(deep=True),
            ball_log=[e.model_copy() for e in ball_log],
            live_state=live.model_copy(),
        ))

    def pop(self) -> Optional[HistoryState]:
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        if self._stack:
            logger.debug(f"Discarding {len(self._stack)} undo snapshots")
        self._stack.clear()

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._stack)
