"""
Periodic trigger wiring.

- ScheduledJob / RuntimeScheduler: interval job and runner interface
- JobQueueBackend: runner on python-telegram-bot's JobQueue
- install_daily_sweep: registers the hourly SRS sweep
"""

from .base import RuntimeScheduler, ScheduledJob
from .job_queue_backend import JobQueueBackend
from .srs_jobs import DAILY_SWEEP_JOB, build_daily_sweep_job, install_daily_sweep

__all__ = [
    "RuntimeScheduler",
    "ScheduledJob",
    "JobQueueBackend",
    "DAILY_SWEEP_JOB",
    "build_daily_sweep_job",
    "install_daily_sweep",
]
