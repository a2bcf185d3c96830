"""RuntimeScheduler backed by python-telegram-bot's JobQueue.

The bot process that hosts the chat layer already runs a JobQueue, so the
sweep rides on it instead of starting a second timer loop.
"""

import logging
from typing import Dict, List

from telegram.ext import Application, Job, JobQueue

from .base import RuntimeScheduler, ScheduledJob

logger = logging.getLogger(__name__)


class JobQueueBackend(RuntimeScheduler):
    def __init__(self, application: Application) -> None:
        self._application = application
        self._handles: Dict[str, Job] = {}

    def _queue(self) -> JobQueue:
        queue = self._application.job_queue
        if queue is None:
            raise RuntimeError(
                "Application has no JobQueue; install python-telegram-bot[job-queue]"
            )
        return queue

    def schedule(self, job: ScheduledJob) -> None:
        if not job.enabled:
            logger.info(f"Job '{job.name}' disabled, not scheduling")
            return

        self.cancel(job.name)
        self._handles[job.name] = self._queue().run_repeating(
            job.callback,
            interval=job.interval_seconds,
            first=job.first_delay_seconds,
            name=job.name,
        )
        logger.info(
            f"Job '{job.name}' runs every {job.interval_seconds}s, "
            f"first in {job.first_delay_seconds}s"
        )

    def cancel(self, name: str) -> bool:
        handle = self._handles.pop(name, None)
        if handle is None:
            return False
        handle.schedule_removal()
        logger.info(f"Job '{name}' cancelled")
        return True

    def list_jobs(self) -> List[str]:
        return sorted(self._handles)

    async def stop(self) -> None:
        for name in list(self._handles):
            self.cancel(name)
