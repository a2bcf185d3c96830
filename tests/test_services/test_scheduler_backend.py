"""Tests for the scheduler abstraction and the daily sweep job."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from review_ladder.core.config import Settings
from review_ladder.services.scheduler import (
    DAILY_SWEEP_JOB,
    JobQueueBackend,
    ScheduledJob,
    build_daily_sweep_job,
    install_daily_sweep,
)
from review_ladder.services.srs.daily_cycle import SweepReport


def _job(name="test", **kwargs):
    kwargs.setdefault("interval_seconds", 60)
    return ScheduledJob(name=name, callback=AsyncMock(), **kwargs)


# ------------------------------------------------------------------
# ScheduledJob validation
# ------------------------------------------------------------------


@pytest.mark.parametrize("seconds", [0, -5])
def test_interval_must_be_positive(seconds):
    with pytest.raises(ValueError, match="interval_seconds"):
        _job(interval_seconds=seconds)


def test_negative_first_delay_rejected():
    with pytest.raises(ValueError, match="first_delay_seconds"):
        _job(first_delay_seconds=-1)


def test_empty_name_rejected():
    with pytest.raises(ValueError, match="name"):
        _job(name="")


def test_defaults():
    job = _job()
    assert job.enabled is True
    assert job.first_delay_seconds == 0


# ------------------------------------------------------------------
# JobQueueBackend
# ------------------------------------------------------------------


@pytest.fixture
def mock_app():
    """Create a mock Application with a job queue."""
    app = MagicMock()
    app.job_queue.run_repeating.side_effect = lambda *a, **kw: MagicMock(name=kw["name"])
    return app


@pytest.fixture
def backend(mock_app):
    return JobQueueBackend(mock_app)


def test_schedule_calls_run_repeating(backend, mock_app):
    job = _job("sweep", interval_seconds=600, first_delay_seconds=30)
    backend.schedule(job)

    mock_app.job_queue.run_repeating.assert_called_once_with(
        job.callback, interval=600, first=30, name="sweep"
    )
    assert backend.list_jobs() == ["sweep"]


def test_schedule_disabled_job(backend, mock_app):
    backend.schedule(_job("disabled", enabled=False))

    mock_app.job_queue.run_repeating.assert_not_called()
    assert backend.list_jobs() == []


def test_cancel_removes_ptb_job(backend):
    backend.schedule(_job("to_cancel"))
    handle = backend._handles["to_cancel"]

    assert backend.cancel("to_cancel") is True
    handle.schedule_removal.assert_called_once()
    assert backend.list_jobs() == []
    assert backend.cancel("to_cancel") is False


def test_rescheduling_replaces_existing(backend, mock_app):
    backend.schedule(_job("dup"))
    first = backend._handles["dup"]
    backend.schedule(_job("dup"))

    first.schedule_removal.assert_called_once()
    assert mock_app.job_queue.run_repeating.call_count == 2
    assert backend.list_jobs() == ["dup"]


async def test_stop_cancels_everything(backend):
    backend.schedule(_job("b"))
    backend.schedule(_job("a"))
    assert backend.list_jobs() == ["a", "b"]

    await backend.stop()

    assert backend.list_jobs() == []


def test_missing_job_queue_raises():
    backend = JobQueueBackend(SimpleNamespace(job_queue=None))
    with pytest.raises(RuntimeError, match="job-queue"):
        backend.schedule(_job())


# ------------------------------------------------------------------
# Daily sweep job
# ------------------------------------------------------------------


def test_daily_sweep_job_uses_settings():
    settings = Settings(daily_sweep_interval_seconds=1800, daily_sweep_first_delay_seconds=5)
    job = build_daily_sweep_job(MagicMock(), settings)

    assert job.name == DAILY_SWEEP_JOB
    assert job.interval_seconds == 1800
    assert job.first_delay_seconds == 5


async def test_daily_sweep_callback_runs_service():
    service = MagicMock()
    service.run_daily_sweep = AsyncMock(return_value=SweepReport(processed=[1, 2]))
    job = build_daily_sweep_job(service, Settings())

    await job.callback(MagicMock())

    service.run_daily_sweep.assert_awaited_once()


async def test_daily_sweep_callback_contains_crash(caplog):
    service = MagicMock()
    service.run_daily_sweep = AsyncMock(side_effect=RuntimeError("db gone"))
    job = build_daily_sweep_job(service, Settings())

    await job.callback(MagicMock())

    assert "SRS daily sweep crashed" in caplog.text


def test_install_daily_sweep(backend, mock_app):
    job = install_daily_sweep(backend, MagicMock(), Settings())

    assert backend.list_jobs() == [DAILY_SWEEP_JOB]
    mock_app.job_queue.run_repeating.assert_called_once_with(
        job.callback, interval=3600, first=60, name=DAILY_SWEEP_JOB
    )
