"""Registers the hourly SRS sweep with a RuntimeScheduler.

The sweep fires on a coarse interval; the per-learner daily claim decides
whether anything actually runs for a learner on a given tick.
"""

import logging
from typing import Optional

from review_ladder.core.config import Settings, get_settings

from .base import RuntimeScheduler, ScheduledJob

logger = logging.getLogger(__name__)

DAILY_SWEEP_JOB = "srs_daily_sweep"


def build_daily_sweep_job(service, settings: Optional[Settings] = None) -> ScheduledJob:
    settings = settings or get_settings()

    async def run_daily_sweep(context=None) -> None:
        try:
            report = await service.run_daily_sweep()
        except Exception as e:
            logger.error(f"SRS daily sweep crashed: {e}", exc_info=True)
            return
        logger.info(
            f"SRS daily sweep: processed={len(report.processed)} "
            f"skipped={len(report.skipped)} failed={len(report.failed)} "
            f"paused={len(report.paused)} reset={len(report.reset_learners)}"
        )

    return ScheduledJob(
        name=DAILY_SWEEP_JOB,
        callback=run_daily_sweep,
        interval_seconds=settings.daily_sweep_interval_seconds,
        first_delay_seconds=settings.daily_sweep_first_delay_seconds,
    )


def install_daily_sweep(
    scheduler: RuntimeScheduler, service, settings: Optional[Settings] = None
) -> ScheduledJob:
    job = build_daily_sweep_job(service, settings)
    scheduler.schedule(job)
    return job
