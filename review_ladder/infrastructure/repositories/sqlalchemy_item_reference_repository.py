"""SQLAlchemy implementation of ItemReferenceRepository."""

import logging
from datetime import datetime
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from review_ladder.domain.ports.catalog import CatalogItem
from review_ladder.models.item_reference import CatalogItemReference

logger = logging.getLogger(__name__)


class SqlAlchemyItemReferenceRepository:
    """Concrete ItemReferenceRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def sync_for_learner(
        self, learner_id: int, items: Sequence[CatalogItem], refreshed_at: datetime
    ) -> int:
        """Make the learner's references match ``items``.

        New items are inserted, existing titles updated, and references
        missing from ``items`` deleted. Dialect-neutral: loads the learner's
        references once and merges in Python rather than relying on
        ON CONFLICT.

        Returns:
            Number of references inserted or updated
        """
        result = await self._session.execute(
            select(CatalogItemReference).where(
                CatalogItemReference.learner_id == learner_id
            )
        )
        existing = {ref.item_id: ref for ref in result.scalars().all()}

        listed = {item.id for item in items}
        stale = [ref for item_id, ref in existing.items() if item_id not in listed]
        for ref in stale:
            await self._session.delete(ref)
            del existing[ref.item_id]
        if stale:
            logger.debug(f"Dropped {len(stale)} stale catalog references for learner {learner_id}")

        written = 0
        for item in items:
            ref = existing.get(item.id)
            if ref is None:
                ref = CatalogItemReference(
                    learner_id=learner_id,
                    item_id=item.id,
                    title=item.title,
                    refreshed_at=refreshed_at,
                )
                self._session.add(ref)
                existing[item.id] = ref
            else:
                ref.title = item.title
                ref.refreshed_at = refreshed_at
            written += 1

        await self._session.flush()
        return written

    async def list_for_learner(self, learner_id: int) -> List[CatalogItemReference]:
        result = await self._session.execute(
            select(CatalogItemReference)
            .where(CatalogItemReference.learner_id == learner_id)
            .order_by(CatalogItemReference.item_id)
        )
        return list(result.scalars().all())
