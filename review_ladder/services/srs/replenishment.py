"""
Replenishment planner.

Introduces new catalog items into a learner's active set, up to the
learner's daily capacity. New records start in reading mode, due today.
"""

import logging
import random
from datetime import datetime
from typing import List, Optional, Sequence

from review_ladder.domain.ports.catalog import CatalogItem
from review_ladder.models.learner import LearnerAccount
from review_ladder.models.progress import ProgressRecord
from review_ladder.models.value_objects import ReadingMode

from .due_set import DueSetSelector, presentable_catalog
from .srs_ladder import initial_due_at

logger = logging.getLogger(__name__)


def pages_to_add(capacity: int, rng: Optional[random.Random] = None) -> int:
    """How many new items a learner with ``capacity`` may start today.

    0, 1, 2 -> 1; 3 -> 1 (60%) or 2 (40%); 4 -> 2; larger -> capacity // 2.
    """
    if capacity <= 2:
        return 1
    if capacity == 3:
        draw = (rng or random).random()
        return 1 if draw < 0.6 else 2
    if capacity == 4:
        return 2
    return capacity // 2


def untracked_in_order(
    catalog_items: Sequence[CatalogItem], tracked_ids: set
) -> List[str]:
    """Ids of presentable catalog items without a record, in ordinal order."""
    seen = set(tracked_ids)
    result = []
    for item in presentable_catalog(catalog_items):
        if item.id in seen:
            continue
        seen.add(item.id)
        result.append(item.id)
    return result


class ReplenishmentPlanner:
    """Seeds new ProgressRecords when today's backlog is below capacity.

    The random source and logger are injected so tests can pin the
    capacity-3 draw and capture output.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._log = log or logger

    def pages_to_add(self, capacity: int) -> int:
        return pages_to_add(capacity, self._rng)

    async def replenish(
        self,
        uow,
        learner: LearnerAccount,
        catalog_items: Sequence[CatalogItem],
        now: Optional[datetime] = None,
    ) -> List[ProgressRecord]:
        """
        Add new items for today, atomically.

        Args:
            uow: SrsUnitOfWork; committed on success, rolled back on failure
            learner: Learner to replenish
            catalog_items: Full catalog listing for the learner's section
            now: Reference instant, injectable for tests

        Returns:
            The created records (empty when capacity is already met)
        """
        capacity = learner.daily_capacity

        due_count = await DueSetSelector(uow.progress).count(learner, catalog_items, now)
        if due_count >= capacity:
            self._log.info(
                f"Learner {learner.id} already has {due_count} due items "
                f"(capacity {capacity}), nothing to add"
            )
            return []

        tracked = await uow.progress.tracked_item_ids(learner.id)
        candidates = untracked_in_order(catalog_items, tracked)
        if not candidates:
            self._log.info(f"No untracked catalog items left for learner {learner.id}")
            return []

        selected = candidates[: self.pages_to_add(capacity)]
        due_at = initial_due_at(learner.timezone, now)
        records = [
            ProgressRecord(
                learner_id=learner.id,
                item_id=item_id,
                state=ReadingMode(),
                next_due_at=due_at,
                reviewed_today=False,
            )
            for item_id in selected
        ]

        try:
            await uow.progress.add_all(records)
            await uow.commit()
        except Exception:
            await uow.rollback()
            self._log.error(
                f"Failed to seed {len(records)} items for learner {learner.id}, rolled back",
                exc_info=True,
            )
            raise

        self._log.info(
            f"Added {len(records)} items to learning for learner {learner.id}: {selected}"
        )
        return records
