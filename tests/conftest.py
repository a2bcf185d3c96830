import logging
import os
import random
from contextlib import asynccontextmanager
from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from review_ladder.core.config import Settings  # noqa: E402
from review_ladder.domain.ports.catalog import CatalogItem  # noqa: E402
from review_ladder.models import Base  # noqa: E402
from review_ladder.models.item_reference import CatalogItemReference  # noqa: E402
from review_ladder.models.learner import LearnerAccount  # noqa: E402
from review_ladder.models.progress import ProgressRecord  # noqa: E402

# Friday 2024-03-15 10:00 UTC (13:00 in Moscow)
NOW = datetime(2024, 3, 15, 10, 0)


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Mutable clock: tests move ``clock.now`` to simulate later ticks."""

    class _Clock:
        def __init__(self):
            self.now = NOW

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        replenish_random_seed=1234,
    )


@pytest.fixture
async def async_engine():
    """Create an in-memory async SQLite engine with all tables.

    StaticPool keeps every session on the same connection, so the
    in-memory database is shared between them.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    """Same contract as core.database.get_db_session, bound to the test engine."""
    maker = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def factory():
        async with maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    return factory


class FakeCatalog:
    """In-memory CatalogClient keyed by section ref."""

    def __init__(self):
        self.sections = {}
        self.calls = []
        self.fail = False

    def set_section(self, section_ref, titles):
        """Titles map item id -> title, e.g. {"p1": "1 Present Simple"}."""
        self.sections[section_ref] = [
            CatalogItem(id=item_id, title=title) for item_id, title in titles.items()
        ]

    async def list_items(self, section_ref):
        self.calls.append(section_ref)
        if self.fail:
            raise ConnectionError("catalog unreachable")
        return list(self.sections.get(section_ref, []))


@pytest.fixture
def catalog():
    return FakeCatalog()


class Seeder:
    """Writes and reads rows through short-lived sessions."""

    def __init__(self, session_factory):
        self._factory = session_factory

    async def learner(self, learner_id=1, **kwargs):
        kwargs.setdefault("timezone", "UTC")
        kwargs.setdefault("last_activity_at", NOW)
        async with self._factory() as session:
            learner = LearnerAccount(id=learner_id, **kwargs)
            session.add(learner)
            await session.commit()
            return learner

    async def progress(self, learner_id, item_id, next_due_at, **kwargs):
        async with self._factory() as session:
            record = ProgressRecord(
                learner_id=learner_id, item_id=item_id, next_due_at=next_due_at, **kwargs
            )
            session.add(record)
            await session.commit()
            return record

    async def references(self, learner_id, titles):
        async with self._factory() as session:
            for item_id, title in titles.items():
                session.add(
                    CatalogItemReference(
                        learner_id=learner_id, item_id=item_id, title=title, refreshed_at=NOW
                    )
                )
            await session.commit()

    async def get_learner(self, learner_id):
        async with self._factory() as session:
            return await session.get(LearnerAccount, learner_id)

    async def get_progress(self, learner_id, item_id):
        async with self._factory() as session:
            return await session.get(ProgressRecord, (learner_id, item_id))

    async def all_progress(self, learner_id):
        async with self._factory() as session:
            result = await session.execute(
                select(ProgressRecord)
                .where(ProgressRecord.learner_id == learner_id)
                .order_by(ProgressRecord.item_id)
            )
            return list(result.scalars().all())


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)
