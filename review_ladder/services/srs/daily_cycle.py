"""
Daily cycle coordinator.

Runs once per learner per local day: claim -> catalog refresh -> reset of
``reviewed_today`` -> replenishment. The claim is a conditional update on
``last_daily_claim_at``, so repeated or concurrent sweeps (even from
separate processes) do the day's work at most once.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from review_ladder.core.database import get_db_session
from review_ladder.domain.errors import CatalogUnavailable, LearnerNotFound
from review_ladder.domain.ports.catalog import CatalogClient, CatalogItem
from review_ladder.infrastructure.unit_of_work import SrsUnitOfWork
from review_ladder.models.learner import LearnerAccount
from review_ladder.utils.logging import bind_learner_context, get_srs_logger

from .due_set import is_draft
from .local_day import start_of_local_day, utc_now
from .replenishment import ReplenishmentPlanner

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of one periodic tick."""

    processed: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    paused: List[int] = field(default_factory=list)
    reset_learners: List[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


async def fetch_catalog(catalog: CatalogClient, learner: LearnerAccount) -> List[CatalogItem]:
    """List the learner's catalog section, wrapping failures in CatalogUnavailable."""
    try:
        return list(await catalog.list_items(learner.catalog_section_ref))
    except Exception as e:
        raise CatalogUnavailable(
            f"Catalog listing failed for learner {learner.id}: {e}"
        ) from e


async def stored_catalog(uow, learner_id: int) -> List[CatalogItem]:
    """The learner's last refreshed catalog mirror."""
    refs = await uow.items.list_for_learner(learner_id)
    return [CatalogItem(id=ref.item_id, title=ref.title) for ref in refs]


class DailyCycleCoordinator:
    """Per-learner daily orchestration guarded by the idempotent claim."""

    def __init__(
        self,
        catalog: CatalogClient,
        planner: Optional[ReplenishmentPlanner] = None,
        session_factory: Callable = get_db_session,
        clock: Callable[[], datetime] = utc_now,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._catalog = catalog
        self._planner = planner or ReplenishmentPlanner(log=log)
        self._session_factory = session_factory
        self._clock = clock
        self._log = log or logger
        self._sweep_log = get_srs_logger()

    async def refresh_catalog(
        self, uow, learner: LearnerAccount, now: datetime
    ) -> List[CatalogItem]:
        """
        Upsert the learner's item references from the live catalog.

        A catalog failure is logged and the stored references are returned
        instead, so the rest of the cycle can proceed.

        Returns:
            Catalog listing to replenish from
        """
        if not learner.has_catalog():
            self._log.info(f"Learner {learner.id} has no catalog section, using stored items")
            return await stored_catalog(uow, learner.id)

        try:
            items = await fetch_catalog(self._catalog, learner)
        except CatalogUnavailable as e:
            self._log.warning(f"{e}; continuing with stored items")
            return await stored_catalog(uow, learner.id)

        published = [item for item in items if not is_draft(item.title)]
        written = await uow.items.sync_for_learner(learner.id, published, now)
        await uow.commit()
        self._log.info(f"Refreshed {written} catalog items for learner {learner.id}")
        return items

    async def run_for_learner(self, learner_id: int) -> bool:
        """
        Run today's cycle for one learner.

        Args:
            learner_id: Learner to process

        Returns:
            True if this call performed the day's work, False if the day
            was already claimed

        Raises:
            LearnerNotFound: Unknown learner id
        """
        now = self._clock()

        async with self._session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await uow.learners.get(learner_id)
            if learner is None:
                raise LearnerNotFound(learner_id)

            day_start = start_of_local_day(learner.timezone, now)
            claimed = await uow.learners.try_claim_daily(learner.id, now, day_start)
            await uow.commit()

            if not claimed:
                self._log.info(f"Learner {learner.id} already processed today, skipping")
                return False

            with bind_learner_context(learner.id):
                catalog_items = await self.refresh_catalog(uow, learner, now)

                reset = await uow.progress.reset_reviewed_today(learner.id)
                await uow.commit()
                self._log.debug(f"Reset reviewed_today on {reset} records for learner {learner.id}")

                if learner.is_paused:
                    self._log.info(f"Learner {learner.id} is paused, not adding new items")
                else:
                    await self._planner.replenish(uow, learner, catalog_items, now)

        return True

    async def list_learner_ids(self) -> List[int]:
        async with self._session_factory() as session:
            learners = await SrsUnitOfWork.from_session(session).learners.list_for_daily_processing()
            return [learner.id for learner in learners]

    async def run_sweep(self, report: Optional[SweepReport] = None) -> SweepReport:
        """Run the daily cycle for every eligible learner.

        One learner's failure is logged and never stops the others.
        """
        report = report or SweepReport()

        for learner_id in await self.list_learner_ids():
            try:
                if await self.run_for_learner(learner_id):
                    report.processed.append(learner_id)
                else:
                    report.skipped.append(learner_id)
            except Exception as e:
                report.failed.append(learner_id)
                self._log.error(f"Daily cycle failed for learner {learner_id}: {e}", exc_info=True)

        self._sweep_log.info(
            "daily cycle sweep finished",
            processed=len(report.processed),
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report
