"""
SRS Service
Entry points the chat-command layer calls into: due items, review
submissions, skips, learner settings and the periodic daily sweep.
"""

import logging
import random
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from review_ladder.core.config import Settings, get_settings
from review_ladder.core.database import get_db_session
from review_ladder.domain.errors import (
    CatalogNotConfigured,
    InvalidCapacity,
    InvalidScore,
    LearnerNotFound,
    ProgressNotFound,
)
from review_ladder.domain.ports.catalog import CatalogClient
from review_ladder.infrastructure.unit_of_work import SrsUnitOfWork
from review_ladder.models.learner import LearnerAccount
from review_ladder.models.progress import ProgressRecord
from review_ladder.models.review_event import MODE_READING, MODE_STANDARD, ReviewEvent
from review_ladder.models.value_objects import Grade, ProgressionState, ReadingMode

from .srs.daily_cycle import DailyCycleCoordinator, SweepReport, fetch_catalog, stored_catalog
from .srs.due_set import DueSetSelector, ItemWithProgress, ordinal_sort_key
from .srs.inactivity import InactivityLifecycleManager
from .srs.local_day import is_valid_zone, utc_now
from .srs.replenishment import ReplenishmentPlanner
from .srs.srs_ladder import compute_next_state, grade_from_score, reaches_pass

logger = logging.getLogger(__name__)


class SRSService:
    """Facade over the scheduler core."""

    def __init__(
        self,
        catalog: CatalogClient,
        session_factory: Callable = get_db_session,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
        log: Optional[logging.Logger] = None,
    ):
        self.settings = settings or get_settings()
        self.catalog = catalog
        self._session_factory = session_factory
        self._clock = clock
        self._log = log or logger

        rng = rng or random.Random(self.settings.replenish_random_seed)
        self.planner = ReplenishmentPlanner(rng=rng, log=self._log)
        self.coordinator = DailyCycleCoordinator(
            catalog,
            planner=self.planner,
            session_factory=session_factory,
            clock=clock,
            log=self._log,
        )
        self.inactivity = InactivityLifecycleManager(
            session_factory=session_factory,
            clock=clock,
            pause_after_days=self.settings.pause_after_inactive_days,
            reset_after_days=self.settings.reset_after_inactive_days,
            reset_window_days=self.settings.reset_window_days,
            log=self._log,
        )

    @staticmethod
    async def _require_learner(uow: SrsUnitOfWork, learner_id: int) -> LearnerAccount:
        learner = await uow.learners.get(learner_id)
        if learner is None:
            raise LearnerNotFound(learner_id)
        return learner

    # --- Learner settings ---

    async def register_learner(
        self,
        learner_id: int,
        username: Optional[str] = None,
        timezone: Optional[str] = None,
        daily_capacity: Optional[int] = None,
    ) -> LearnerAccount:
        """Get or create the learner on first interaction."""
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await uow.learners.get(learner_id)
            if learner is not None:
                return learner

            learner = LearnerAccount(
                id=learner_id,
                username=username,
                timezone=timezone or self.settings.default_timezone,
                daily_capacity=daily_capacity or self.settings.default_daily_capacity,
                last_activity_at=self._clock(),
            )
            await uow.learners.add(learner)
            await uow.commit()
            self._log.info(f"Registered learner {learner_id}")
            return learner

    async def set_timezone(self, learner_id: int, timezone: str) -> str:
        """Store a validated IANA zone identifier.

        Raises:
            ValueError: Unknown zone identifier
        """
        if not is_valid_zone(timezone):
            raise ValueError(f"Unknown timezone: {timezone!r}")
        timezone = timezone.strip()

        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            learner.timezone = timezone
            await uow.commit()
        return timezone

    async def set_daily_capacity(self, learner_id: int, capacity: int) -> None:
        if capacity < 1:
            raise InvalidCapacity(capacity)
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            learner.daily_capacity = capacity
            await uow.commit()

    async def set_catalog_section(self, learner_id: int, section_ref: str) -> None:
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            learner.catalog_section_ref = section_ref
            await uow.commit()

    # --- Scheduling ---

    def compute_next_state(
        self,
        state: ProgressionState,
        grade: Grade,
        timezone: Optional[str],
        now: Optional[datetime] = None,
    ) -> Tuple[datetime, ProgressionState]:
        return compute_next_state(state, grade, timezone, now or self._clock())

    async def get_due_items(self, learner_id: int) -> List[ItemWithProgress]:
        """Today's items for a learner, joined with live catalog titles.

        Raises:
            LearnerNotFound: Unknown learner
            CatalogNotConfigured: No catalog section selected
            CatalogUnavailable: The catalog listing failed
        """
        now = self._clock()
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            if not learner.has_catalog():
                raise CatalogNotConfigured(learner_id)

            selector = DueSetSelector(uow.progress)
            if not await selector.due_records(learner, now):
                return []

            items = await fetch_catalog(self.catalog, learner)
            return await selector.select(learner, items, now)

    async def record_review(self, learner_id: int, item_id: str, score: int) -> ProgressRecord:
        """
        Apply a review submission.

        Moves the item along the ladder, appends a ReviewEvent, and records
        learner activity (which also clears a pause). All in one transaction.

        Args:
            learner_id: Reviewing learner
            item_id: Reviewed item; must already be tracked
            score: Recall score, 0-100

        Returns:
            The updated ProgressRecord

        Raises:
            InvalidScore: Score outside 0-100
            LearnerNotFound: Unknown learner
            ProgressNotFound: Item not tracked for this learner
        """
        if not 0 <= score <= 100:
            raise InvalidScore(score)

        now = self._clock()
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            record = await uow.progress.get(learner_id, item_id)
            if record is None:
                raise ProgressNotFound(learner_id, item_id)

            grade = grade_from_score(score)
            prior = record.state
            next_due_at, next_state = compute_next_state(prior, grade, learner.timezone, now)

            record.state = next_state
            record.next_due_at = next_due_at
            record.repetition_count += 1
            record.last_reviewed_at = now
            record.reviewed_today = True
            record.passed = reaches_pass(prior, grade)

            await uow.events.add(
                ReviewEvent(
                    learner_id=learner_id,
                    item_id=item_id,
                    reviewed_at=now,
                    score=score,
                    mode=MODE_READING if isinstance(prior, ReadingMode) else MODE_STANDARD,
                )
            )
            await self.inactivity.resume(uow, learner, now)
            await uow.commit()

        self._log.info(
            f"Learner {learner_id} reviewed {item_id}: score={score} grade={grade.value} "
            f"{prior!r} -> {next_state!r}, next due {next_due_at}"
        )
        return record

    async def skip_item(self, learner_id: int, item_id: str) -> None:
        """Stop scheduling an item by deleting its record."""
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            if not await uow.progress.delete(learner_id, item_id):
                raise ProgressNotFound(learner_id, item_id)
            await uow.commit()
        self._log.info(f"Learner {learner_id} skipped item {item_id}")

    async def get_last_review_score(self, learner_id: int, item_id: str) -> Optional[int]:
        async with self._session_factory() as session:
            event = await SrsUnitOfWork.from_session(session).events.latest_for_item(
                learner_id, item_id
            )
            return event.score if event else None

    async def get_items_in_progress(self, learner_id: int) -> List[ItemWithProgress]:
        """Every tracked item with its stored title, ordered by leading ordinal."""
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            await self._require_learner(uow, learner_id)
            titles = {item.id: item for item in await stored_catalog(uow, learner_id)}
            records = await uow.progress.list_for_learner(learner_id)

        tracked = [
            ItemWithProgress(progress=record, item=titles[record.item_id])
            for record in records
            if record.item_id in titles
        ]
        return sorted(tracked, key=lambda t: ordinal_sort_key(t.title))

    # --- Batch ---

    async def prepare_materials(self, learner_id: int) -> List[ProgressRecord]:
        """Refresh and replenish right away, outside the daily claim.

        Used once a learner has picked a catalog section so they do not
        wait for the next sweep.
        """
        now = self._clock()
        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await self._require_learner(uow, learner_id)
            if not learner.has_catalog():
                raise CatalogNotConfigured(learner_id)

            items = await self.coordinator.refresh_catalog(uow, learner, now)
            return await self.planner.replenish(uow, learner, items, now)

    async def run_daily_cycle(self, learner_id: int) -> bool:
        return await self.coordinator.run_for_learner(learner_id)

    async def run_daily_sweep(self) -> SweepReport:
        """One periodic tick: every learner's daily cycle, then the inactivity sweeps."""
        report = await self.coordinator.run_sweep()

        try:
            report.paused = await self.inactivity.pause_sweep()
        except Exception as e:
            self._log.error(f"Pause sweep failed: {e}", exc_info=True)

        try:
            report.reset_learners = sorted(await self.inactivity.reset_sweep())
        except Exception as e:
            self._log.error(f"Reset sweep failed: {e}", exc_info=True)

        return report
