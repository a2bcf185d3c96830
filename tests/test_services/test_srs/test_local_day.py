"""Tests for the local-day clock."""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from review_ladder.services.srs.local_day import (
    due_boundary,
    is_valid_zone,
    local_date,
    resolve_zone,
    start_of_local_day,
    start_of_next_local_day,
    to_storage,
    utc_now,
)

NOW = datetime(2024, 3, 15, 10, 0)


class TestStartOfLocalDay:
    def test_utc(self):
        assert start_of_local_day("UTC", NOW) == datetime(2024, 3, 15)

    def test_positive_offset(self):
        # Moscow is UTC+3 all year
        assert start_of_local_day("Europe/Moscow", NOW) == datetime(2024, 3, 14, 21, 0)

    def test_negative_offset(self):
        # 06:00 EDT on the 15th
        assert start_of_local_day("America/New_York", NOW) == datetime(2024, 3, 15, 4, 0)

    def test_local_date_rolls_over_before_utc(self):
        late = datetime(2024, 3, 15, 22, 30)
        assert local_date("Europe/Moscow", late).day == 16
        assert start_of_local_day("Europe/Moscow", late) == datetime(2024, 3, 15, 21, 0)

    def test_days_ahead_across_dst_start(self):
        # New York springs forward on 2024-03-10
        noon_est = datetime(2024, 3, 9, 17, 0)
        assert start_of_local_day("America/New_York", noon_est, days_ahead=1) == datetime(
            2024, 3, 10, 5, 0
        )
        assert start_of_local_day("America/New_York", noon_est, days_ahead=2) == datetime(
            2024, 3, 11, 4, 0
        )

    def test_result_is_naive(self):
        assert start_of_local_day("Asia/Tokyo", NOW).tzinfo is None

    def test_accepts_aware_reference(self):
        aware = datetime(2024, 3, 15, 13, 0, tzinfo=ZoneInfo("Europe/Moscow"))
        assert start_of_local_day("UTC", aware) == datetime(2024, 3, 15)

    def test_defaults_to_current_time(self):
        assert start_of_local_day("UTC") == utc_now().replace(
            hour=0, minute=0, second=0, microsecond=0
        )


class TestFallback:
    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "   "])
    def test_invalid_zone_falls_back_to_utc(self, name, caplog):
        with caplog.at_level(logging.WARNING):
            assert start_of_local_day(name, NOW) == datetime(2024, 3, 15)
        assert "falling back to UTC" in caplog.text

    def test_none_falls_back_silently(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert resolve_zone(None) is timezone.utc
        assert caplog.text == ""

    def test_is_valid_zone(self):
        assert is_valid_zone("Europe/Berlin")
        assert not is_valid_zone("Europe/Atlantis")
        assert not is_valid_zone("")
        assert not is_valid_zone(None)


def test_due_boundary_is_next_local_midnight():
    assert due_boundary("UTC", NOW) == datetime(2024, 3, 16)
    assert due_boundary("Europe/Moscow", NOW) == start_of_next_local_day("Europe/Moscow", NOW)


def test_to_storage_normalizes_aware_values():
    aware = datetime(2024, 3, 15, 13, 0, tzinfo=ZoneInfo("Europe/Moscow"))
    assert to_storage(aware) == datetime(2024, 3, 15, 10, 0)
    assert to_storage(NOW) is NOW
