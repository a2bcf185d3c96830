"""Bundle of repositories sharing one AsyncSession (one transaction)."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .repositories import (
    SqlAlchemyItemReferenceRepository,
    SqlAlchemyLearnerRepository,
    SqlAlchemyProgressRepository,
    SqlAlchemyReviewEventRepository,
)


@dataclass
class SrsUnitOfWork:
    session: AsyncSession
    learners: SqlAlchemyLearnerRepository
    progress: SqlAlchemyProgressRepository
    items: SqlAlchemyItemReferenceRepository
    events: SqlAlchemyReviewEventRepository

    @classmethod
    def from_session(cls, session: AsyncSession) -> "SrsUnitOfWork":
        return cls(
            session=session,
            learners=SqlAlchemyLearnerRepository(session),
            progress=SqlAlchemyProgressRepository(session),
            items=SqlAlchemyItemReferenceRepository(session),
            events=SqlAlchemyReviewEventRepository(session),
        )

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
