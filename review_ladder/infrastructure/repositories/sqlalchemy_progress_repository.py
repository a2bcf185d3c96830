"""SQLAlchemy implementation of ProgressRepository."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Set

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from review_ladder.models.progress import ProgressRecord

logger = logging.getLogger(__name__)


class SqlAlchemyProgressRepository:
    """Concrete ProgressRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, learner_id: int, item_id: str) -> Optional[ProgressRecord]:
        result = await self._session.execute(
            select(ProgressRecord).where(
                ProgressRecord.learner_id == learner_id,
                ProgressRecord.item_id == item_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_due(self, learner_id: int, boundary: datetime) -> List[ProgressRecord]:
        result = await self._session.execute(
            select(ProgressRecord)
            .where(
                ProgressRecord.learner_id == learner_id,
                ProgressRecord.next_due_at <= boundary,
                ProgressRecord.reviewed_today == False,  # noqa: E712
            )
            .order_by(ProgressRecord.next_due_at.asc(), ProgressRecord.item_id.asc())
        )
        return list(result.scalars().all())

    async def list_for_learner(self, learner_id: int) -> List[ProgressRecord]:
        result = await self._session.execute(
            select(ProgressRecord)
            .where(ProgressRecord.learner_id == learner_id)
            .order_by(ProgressRecord.next_due_at.asc(), ProgressRecord.item_id.asc())
        )
        return list(result.scalars().all())

    async def tracked_item_ids(self, learner_id: int) -> Set[str]:
        result = await self._session.execute(
            select(ProgressRecord.item_id).where(ProgressRecord.learner_id == learner_id)
        )
        return set(result.scalars().all())

    async def add_all(self, records: Sequence[ProgressRecord]) -> None:
        self._session.add_all(records)
        await self._session.flush()

    async def reset_reviewed_today(self, learner_id: int) -> int:
        result = await self._session.execute(
            update(ProgressRecord)
            .where(
                ProgressRecord.learner_id == learner_id,
                ProgressRecord.reviewed_today == True,  # noqa: E712
            )
            .values(reviewed_today=False)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount  # type: ignore[attr-defined]

    async def roll_back_due_before(
        self,
        learner_id: int,
        horizon: datetime,
        ladder_index: int,
        next_due_at: datetime,
    ) -> int:
        result = await self._session.execute(
            update(ProgressRecord)
            .where(
                ProgressRecord.learner_id == learner_id,
                ProgressRecord.passed == False,  # noqa: E712
                ProgressRecord.next_due_at <= horizon,
            )
            .values(ladder_index=ladder_index, next_due_at=next_due_at)
            .execution_options(synchronize_session="evaluate")
        )
        return result.rowcount  # type: ignore[attr-defined]

    async def delete(self, learner_id: int, item_id: str) -> bool:
        result = await self._session.execute(
            delete(ProgressRecord).where(
                ProgressRecord.learner_id == learner_id,
                ProgressRecord.item_id == item_id,
            )
        )
        return result.rowcount > 0  # type: ignore[attr-defined]
