"""
Periodic job description and the scheduler interface it is installed on.

Only fixed-interval jobs are needed: the daily sweep fires on a coarse
interval and the per-learner claim decides what actually runs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, List


@dataclass
class ScheduledJob:
    """A coroutine callback fired every ``interval_seconds``.

    ``callback`` receives the backend's job context (for JobQueue, a
    ``CallbackContext``).
    """

    name: str
    callback: Callable[..., Coroutine[Any, Any, None]]
    interval_seconds: int
    first_delay_seconds: int = 0
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("job name must not be empty")
        if self.interval_seconds < 1:
            raise ValueError(f"job '{self.name}': interval_seconds must be >= 1")
        if self.first_delay_seconds < 0:
            raise ValueError(f"job '{self.name}': first_delay_seconds must be >= 0")


class RuntimeScheduler(ABC):
    """In-process runner for ScheduledJobs, keyed by job name."""

    @abstractmethod
    def schedule(self, job: ScheduledJob) -> None:
        """Start running ``job``, replacing any job with the same name."""

    @abstractmethod
    def cancel(self, name: str) -> bool:
        """Stop a job. Returns False if no job had that name."""

    @abstractmethod
    def list_jobs(self) -> List[str]:
        """Names of the running jobs."""

    @abstractmethod
    async def stop(self) -> None:
        """Cancel every job."""
