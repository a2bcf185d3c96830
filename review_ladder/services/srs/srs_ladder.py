#!/usr/bin/env python3
"""
SRS Interval Ladder
Fixed-step progression: 1, 3, 7, 14, 30, 90, 180 days
"""

from datetime import datetime
from typing import Optional, Tuple

from review_ladder.models.value_objects import (
    LADDER_DAYS,
    Grade,
    LadderStep,
    ProgressionState,
    ReadingMode,
)

from .local_day import start_of_local_day

__all__ = [
    "LADDER_DAYS",
    "advance",
    "compute_next_state",
    "grade_from_score",
    "initial_due_at",
    "reaches_pass",
]


def grade_from_score(score: int) -> Grade:
    """Convert a 0-100 score into a recall grade."""
    return Grade.from_score(score)


def advance(state: ProgressionState, grade: Grade) -> ProgressionState:
    """
    Move one position along the ladder.

    Args:
        state: Current progression state
        grade: Recall grade of this review

    Returns:
        Next progression state
    """
    if isinstance(state, ReadingMode):
        # Leaving reading mode needs a passing grade; otherwise read it again
        return LadderStep.first() if grade.advances else state

    # Forgot: back to the start, wherever we were
    if grade is Grade.FORGOT:
        return LadderStep.first()

    if grade.advances:
        return state if state.is_last else LadderStep(state.index + 1)

    # Hard: one step down, floor at the first step
    return state if state.is_first else LadderStep(state.index - 1)


def reaches_pass(state: ProgressionState, grade: Grade) -> bool:
    """True when a non-regressing grade holds the terminal step."""
    return isinstance(state, LadderStep) and state.is_last and grade.advances


def compute_next_state(
    state: ProgressionState,
    grade: Grade,
    tz_name: Optional[str],
    now: Optional[datetime] = None,
) -> Tuple[datetime, ProgressionState]:
    """
    Calculate the next due instant and progression state.

    Ladder steps are due at the start of the learner's current local day
    plus the new step's magnitude. Both reading-mode exits are due at the
    start of the next local day.

    Args:
        state: Current progression state
        grade: Recall grade of this review
        tz_name: Learner timezone (falls back to UTC)
        now: Reference instant, injectable for tests

    Returns:
        (next_due_at, next_state), next_due_at as naive UTC
    """
    next_state = advance(state, grade)

    if isinstance(state, ReadingMode):
        return start_of_local_day(tz_name, now, days_ahead=1), next_state

    return start_of_local_day(tz_name, now, days_ahead=next_state.days), next_state


def initial_due_at(tz_name: Optional[str], now: Optional[datetime] = None) -> datetime:
    """Due instant for a freshly introduced item: start of today."""
    return start_of_local_day(tz_name, now)
