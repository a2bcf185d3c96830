"""
SRS (Spaced Repetition System) Module
Fixed-ladder scheduling with a once-per-local-day batch cycle
"""

from .daily_cycle import DailyCycleCoordinator, SweepReport
from .due_set import DueSetSelector, ItemWithProgress, parse_leading_ordinal
from .inactivity import InactivityLifecycleManager
from .local_day import due_boundary, start_of_local_day, utc_now
from .replenishment import ReplenishmentPlanner, pages_to_add
from .srs_ladder import advance, compute_next_state, grade_from_score, reaches_pass

__all__ = [
    "advance",
    "compute_next_state",
    "grade_from_score",
    "reaches_pass",
    "start_of_local_day",
    "due_boundary",
    "utc_now",
    "DueSetSelector",
    "ItemWithProgress",
    "parse_leading_ordinal",
    "ReplenishmentPlanner",
    "pages_to_add",
    "DailyCycleCoordinator",
    "SweepReport",
    "InactivityLifecycleManager",
]
