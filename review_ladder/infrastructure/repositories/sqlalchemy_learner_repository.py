"""SQLAlchemy implementation of LearnerRepository."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from review_ladder.models.learner import LearnerAccount

logger = logging.getLogger(__name__)


class SqlAlchemyLearnerRepository:
    """Concrete LearnerRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, learner_id: int) -> Optional[LearnerAccount]:
        result = await self._session.execute(
            select(LearnerAccount).where(LearnerAccount.id == learner_id)
        )
        return result.scalar_one_or_none()

    async def add(self, learner: LearnerAccount) -> LearnerAccount:
        self._session.add(learner)
        await self._session.flush()
        return learner

    async def list_for_daily_processing(self) -> List[LearnerAccount]:
        result = await self._session.execute(
            select(LearnerAccount)
            .where(LearnerAccount.catalog_section_ref.isnot(None))
            .order_by(LearnerAccount.id)
        )
        return list(result.scalars().all())

    async def try_claim_daily(
        self, learner_id: int, now: datetime, start_of_local_day: datetime
    ) -> bool:
        """Conditional UPDATE; the affected row count decides the claim."""
        result = await self._session.execute(
            update(LearnerAccount)
            .where(
                LearnerAccount.id == learner_id,
                or_(
                    LearnerAccount.last_daily_claim_at.is_(None),
                    LearnerAccount.last_daily_claim_at < start_of_local_day,
                ),
            )
            .values(last_daily_claim_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def record_activity(self, learner_id: int, at: datetime) -> None:
        await self._session.execute(
            update(LearnerAccount)
            .where(LearnerAccount.id == learner_id)
            .values(last_activity_at=at, is_paused=False)
            .execution_options(synchronize_session="evaluate")
        )

    async def set_paused(self, learner_id: int, paused: bool) -> None:
        await self._session.execute(
            update(LearnerAccount)
            .where(LearnerAccount.id == learner_id)
            .values(is_paused=paused)
            .execution_options(synchronize_session="evaluate")
        )

    async def list_inactive_since(
        self, cutoff: datetime, exclude_paused: bool = False
    ) -> List[LearnerAccount]:
        query = select(LearnerAccount).where(
            LearnerAccount.last_activity_at.isnot(None),
            LearnerAccount.last_activity_at < cutoff,
        )
        if exclude_paused:
            query = query.where(LearnerAccount.is_paused == False)  # noqa: E712
        result = await self._session.execute(query.order_by(LearnerAccount.id))
        return list(result.scalars().all())
