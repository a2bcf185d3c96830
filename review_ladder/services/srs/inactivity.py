"""
Inactivity lifecycle.

- Pause: learners inactive for a week whose due backlog already fills
  their daily capacity are paused, so replenishment stops growing it.
- Reset: learners inactive for a month get every non-passed item due in
  the next month collapsed back to the first ladder step, due tomorrow.
- Resume: any review submission clears the pause.

The reset sweep takes "today" from the server clock (UTC), not from each
learner's timezone.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from review_ladder.core.database import get_db_session
from review_ladder.infrastructure.unit_of_work import SrsUnitOfWork
from review_ladder.models.value_objects import LadderStep

from .daily_cycle import stored_catalog
from .due_set import DueSetSelector
from .local_day import start_of_local_day, utc_now

logger = logging.getLogger(__name__)

SERVER_ZONE = "UTC"


class InactivityLifecycleManager:
    """Pauses, resumes and rolls back learners based on activity."""

    def __init__(
        self,
        session_factory: Callable = get_db_session,
        clock: Callable[[], datetime] = utc_now,
        pause_after_days: int = 7,
        reset_after_days: int = 30,
        reset_window_days: int = 30,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self.pause_after = timedelta(days=pause_after_days)
        self.reset_after = timedelta(days=reset_after_days)
        self.reset_window = timedelta(days=reset_window_days)
        self._log = log or logger

    async def pause_sweep(self) -> List[int]:
        """Pause inactive learners whose backlog has saturated today's quota.

        Returns:
            Ids of learners paused by this sweep
        """
        now = self._clock()
        paused = []

        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            candidates = await uow.learners.list_inactive_since(
                now - self.pause_after, exclude_paused=True
            )
            selector = DueSetSelector(uow.progress)

            for learner in candidates:
                try:
                    items = await stored_catalog(uow, learner.id)
                    due_count = await selector.count(learner, items, now)
                except Exception as e:
                    self._log.error(f"Pause check failed for learner {learner.id}: {e}", exc_info=True)
                    continue
                if due_count >= learner.daily_capacity:
                    paused.append(learner.id)
                    self._log.info(
                        f"Pausing learner {learner.id}: inactive since "
                        f"{learner.last_activity_at}, {due_count} items due"
                    )

            for learner_id in paused:
                await uow.learners.set_paused(learner_id, True)
            await uow.commit()

        return paused

    async def reset_sweep(self) -> Dict[int, int]:
        """Collapse upcoming items of long-inactive learners to the first step.

        Returns:
            Mapping of learner id to number of records rolled back
        """
        now = self._clock()
        today = start_of_local_day(SERVER_ZONE, now)
        tomorrow = start_of_local_day(SERVER_ZONE, now, days_ahead=1)
        horizon = today + self.reset_window
        rolled_back = {}

        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            candidates = await uow.learners.list_inactive_since(now - self.reset_after)
            learner_ids = [learner.id for learner in candidates]

            for learner_id in learner_ids:
                try:
                    count = await uow.progress.roll_back_due_before(
                        learner_id, horizon, LadderStep.first().index, tomorrow
                    )
                    await uow.commit()
                except Exception as e:
                    await uow.rollback()
                    self._log.error(f"Interval reset failed for learner {learner_id}: {e}", exc_info=True)
                    continue
                if count:
                    rolled_back[learner_id] = count
                    self._log.info(f"Rolled back {count} items for inactive learner {learner_id}")

        return rolled_back

    async def resume(self, uow, learner, at: datetime) -> bool:
        """Record activity and clear the pause. Does not commit.

        Returns:
            True if the learner was paused before this call
        """
        was_paused = bool(learner.is_paused)
        await uow.learners.record_activity(learner.id, at)
        if was_paused:
            self._log.info(f"Resumed paused learner {learner.id}")
        return was_paused
