"""
Due-set selection.

Picks the learner's records due by the end of the local day, joins them
with catalog titles and orders them for presentation: leading ordinal of
the title first, then ``next_due_at``.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from review_ladder.domain.ports.catalog import CatalogItem
from review_ladder.models.learner import LearnerAccount
from review_ladder.models.progress import ProgressRecord

from .local_day import due_boundary

logger = logging.getLogger(__name__)

DRAFT_MARKER = "*"
# Sorts titles without a leading number after every numbered one
ORDINAL_SENTINEL = 999999

_LEADING_ORDINAL_RE = re.compile(r"^\d+")


def parse_leading_ordinal(title: str) -> Optional[int]:
    """Leading integer of a title, e.g. "14 Grammar Sequence of Tenses" -> 14."""
    match = _LEADING_ORDINAL_RE.match((title or "").strip())
    if not match:
        return None
    return int(match.group(0))


def ordinal_sort_key(title: str) -> int:
    ordinal = parse_leading_ordinal(title)
    return ORDINAL_SENTINEL if ordinal is None else ordinal


def is_draft(title: str) -> bool:
    return DRAFT_MARKER in (title or "")


def is_presentable(title: str) -> bool:
    """Published (no draft marker) and numbered."""
    return not is_draft(title) and parse_leading_ordinal(title) is not None


def presentable_catalog(items: Iterable[CatalogItem]) -> List[CatalogItem]:
    """Filter out drafts and unnumbered items; sort by leading ordinal.

    The sort is stable, so equal ordinals keep catalog order.
    """
    eligible = [item for item in items if is_presentable(item.title)]
    return sorted(eligible, key=lambda item: ordinal_sort_key(item.title))


@dataclass
class ItemWithProgress:
    """A ProgressRecord joined with its catalog entry."""

    progress: ProgressRecord
    item: CatalogItem

    @property
    def item_id(self) -> str:
        return self.item.id

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def ordinal(self) -> int:
        return ordinal_sort_key(self.item.title)


def order_due_items(due_items: Iterable[ItemWithProgress]) -> List[ItemWithProgress]:
    """Presentation order: ordinal ascending, then ``next_due_at`` ascending."""
    return sorted(due_items, key=lambda d: (d.ordinal, d.progress.next_due_at))


class DueSetSelector:
    """Selects and orders what a learner should review today."""

    def __init__(self, progress_repo) -> None:
        self._progress = progress_repo

    async def due_records(
        self, learner: LearnerAccount, now: Optional[datetime] = None
    ) -> List[ProgressRecord]:
        """Raw due records: ``next_due_at <= due boundary`` and not reviewed today."""
        boundary = due_boundary(learner.timezone, now)
        return await self._progress.list_due(learner.id, boundary)

    async def select(
        self,
        learner: LearnerAccount,
        catalog_items: Sequence[CatalogItem],
        now: Optional[datetime] = None,
    ) -> List[ItemWithProgress]:
        """
        Build the ordered due set.

        Args:
            learner: The learner whose records are examined
            catalog_items: Titles to join against (live catalog or stored references)
            now: Reference instant, injectable for tests

        Returns:
            DueItems in presentation order
        """
        records = await self.due_records(learner, now)
        if not records:
            return []

        by_id = {item.id: item for item in catalog_items}
        joined = []
        for record in records:
            item = by_id.get(record.item_id)
            if item is None:
                logger.debug(
                    f"Due item {record.item_id} missing from catalog for learner {learner.id}"
                )
                continue
            if not is_presentable(item.title):
                continue
            joined.append(ItemWithProgress(progress=record, item=item))

        return order_due_items(joined)

    async def count(
        self,
        learner: LearnerAccount,
        catalog_items: Sequence[CatalogItem],
        now: Optional[datetime] = None,
    ) -> int:
        return len(await self.select(learner, catalog_items, now))
