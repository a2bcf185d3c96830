"""Tests for the inactivity lifecycle: pause, reset and resume."""

from datetime import datetime, timedelta

import pytest

from review_ladder.infrastructure.unit_of_work import SrsUnitOfWork
from review_ladder.models.value_objects import LadderStep
from review_ladder.services.srs.inactivity import InactivityLifecycleManager

NOW = datetime(2024, 3, 15, 10, 0)
TODAY = datetime(2024, 3, 15)
TOMORROW = datetime(2024, 3, 16)

TITLES = {f"l{n}": f"{n} Lesson" for n in range(1, 6)}


@pytest.fixture
def manager(session_factory, clock):
    return InactivityLifecycleManager(session_factory=session_factory, clock=clock)


async def _learner_with_due(seed, learner_id, due_count, inactive_days, **kwargs):
    await seed.learner(
        learner_id, last_activity_at=NOW - timedelta(days=inactive_days), **kwargs
    )
    await seed.references(learner_id, TITLES)
    for n in range(1, due_count + 1):
        await seed.progress(learner_id, f"l{n}", TODAY - timedelta(days=n), state=LadderStep(1))


class TestPauseSweep:
    async def test_pauses_inactive_learner_with_full_backlog(self, manager, seed):
        await _learner_with_due(seed, 1, due_count=2, inactive_days=8, daily_capacity=2)

        assert await manager.pause_sweep() == [1]
        assert (await seed.get_learner(1)).is_paused is True

    async def test_backlog_below_capacity_stays_active(self, manager, seed):
        await _learner_with_due(seed, 1, due_count=1, inactive_days=8, daily_capacity=2)

        assert await manager.pause_sweep() == []
        assert (await seed.get_learner(1)).is_paused is False

    async def test_recently_active_learner_stays_active(self, manager, seed):
        await _learner_with_due(seed, 1, due_count=5, inactive_days=6, daily_capacity=2)

        assert await manager.pause_sweep() == []

    async def test_never_active_learner_is_ignored(self, manager, seed):
        await seed.learner(1, last_activity_at=None, daily_capacity=1)
        await seed.references(1, TITLES)
        await seed.progress(1, "l1", TODAY, state=LadderStep(0))

        assert await manager.pause_sweep() == []

    async def test_already_paused_not_reported_again(self, manager, seed):
        await _learner_with_due(seed, 1, due_count=3, inactive_days=9, daily_capacity=2, is_paused=True)

        assert await manager.pause_sweep() == []
        assert (await seed.get_learner(1)).is_paused is True


class TestResetSweep:
    async def test_rolls_back_upcoming_non_passed_items(self, manager, seed):
        await seed.learner(1, last_activity_at=NOW - timedelta(days=31))
        await seed.progress(1, "upcoming", TODAY + timedelta(days=10), state=LadderStep(4))
        await seed.progress(1, "overdue", TODAY - timedelta(days=3), state=LadderStep(2))
        await seed.progress(1, "edge", TODAY + timedelta(days=30), state=LadderStep(3))
        await seed.progress(1, "far", TODAY + timedelta(days=60), state=LadderStep(5))
        await seed.progress(1, "passed", TODAY + timedelta(days=5), state=LadderStep(6), passed=True)

        assert await manager.reset_sweep() == {1: 3}

        for item_id in ("upcoming", "overdue", "edge"):
            record = await seed.get_progress(1, item_id)
            assert record.state == LadderStep.first()
            assert record.next_due_at == TOMORROW

        far = await seed.get_progress(1, "far")
        assert far.state == LadderStep(5)
        assert far.next_due_at == TODAY + timedelta(days=60)

        passed = await seed.get_progress(1, "passed")
        assert passed.state == LadderStep(6)

    async def test_uses_server_day_not_learner_timezone(self, manager, seed):
        # Moscow's "tomorrow" would be 21:00 UTC on the 15th; the reset uses UTC
        await seed.learner(1, timezone="Europe/Moscow", last_activity_at=NOW - timedelta(days=40))
        await seed.progress(1, "l1", TODAY + timedelta(days=1), state=LadderStep(2))

        await manager.reset_sweep()

        assert (await seed.get_progress(1, "l1")).next_due_at == TOMORROW

    async def test_active_learner_untouched(self, manager, seed):
        await seed.learner(1, last_activity_at=NOW - timedelta(days=10))
        await seed.progress(1, "l1", TODAY + timedelta(days=10), state=LadderStep(4))

        assert await manager.reset_sweep() == {}
        assert (await seed.get_progress(1, "l1")).state == LadderStep(4)

    async def test_custom_thresholds(self, session_factory, clock, seed):
        manager = InactivityLifecycleManager(
            session_factory=session_factory, clock=clock, reset_after_days=5, reset_window_days=2
        )
        await seed.learner(1, last_activity_at=NOW - timedelta(days=6))
        await seed.progress(1, "near", TODAY + timedelta(days=1), state=LadderStep(3))
        await seed.progress(1, "later", TODAY + timedelta(days=3), state=LadderStep(3))

        assert await manager.reset_sweep() == {1: 1}
        assert (await seed.get_progress(1, "later")).state == LadderStep(3)


class TestResume:
    async def test_resume_clears_pause_and_records_activity(self, manager, seed, session_factory):
        await seed.learner(1, is_paused=True, last_activity_at=NOW - timedelta(days=20))

        async with session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            learner = await uow.learners.get(1)
            assert await manager.resume(uow, learner, NOW) is True
            await uow.commit()

        learner = await seed.get_learner(1)
        assert learner.is_paused is False
        assert learner.last_activity_at == NOW

    async def test_resume_active_learner(self, manager, seed, session_factory):
        await seed.learner(1)
        async with session_factory() as session:
            uow = SrsUnitOfWork.from_session(session)
            assert await manager.resume(uow, await uow.learners.get(1), NOW) is False
