"""SQLAlchemy implementation of ReviewEventRepository."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from review_ladder.models.review_event import ReviewEvent

logger = logging.getLogger(__name__)


class SqlAlchemyReviewEventRepository:
    """Concrete ReviewEventRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, event: ReviewEvent) -> ReviewEvent:
        self._session.add(event)
        await self._session.flush()
        return event

    async def latest_for_item(self, learner_id: int, item_id: str) -> Optional[ReviewEvent]:
        result = await self._session.execute(
            select(ReviewEvent)
            .where(ReviewEvent.learner_id == learner_id, ReviewEvent.item_id == item_id)
            .order_by(ReviewEvent.reviewed_at.desc(), ReviewEvent.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
