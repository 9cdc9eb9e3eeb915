"""Tests for duration checks and overlap detection."""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from courtside.core.exceptions import (
    ConflictException,
    RejectionReason,
    ValidationException,
)
from courtside.services.conflict_detector import check_conflict, find_conflict, validate_duration
from courtside.services.time_windows import Interval


def _at(hour, minute=0, day=7):
    return datetime(2030, 1, day, hour, minute, tzinfo=timezone.utc)


def _booking(booking_id, start, end, status="pending"):
    return SimpleNamespace(id=booking_id, start_time=start, end_time=end, status=status)


class TestValidateDuration:
    def test_returns_hours(self):
        assert validate_duration(Interval(_at(10), _at(12)), 8) == Decimal(2)

    def test_limit_is_inclusive(self):
        assert validate_duration(Interval(_at(8), _at(16)), 8) == Decimal(8)

    def test_too_long(self):
        with pytest.raises(ValidationException) as exc:
            validate_duration(Interval(_at(8), _at(17)), 8)
        assert exc.value.reason == RejectionReason.INVALID_DURATION


class TestFindConflict:
    existing = [
        _booking(1, _at(10), _at(12)),
        _booking(2, _at(14), _at(15), status="cancelled"),
        _booking(3, _at(16), _at(17), status="paid"),
    ]

    def test_one_minute_overlap(self):
        clash = find_conflict(Interval(_at(11, 59), _at(13)), self.existing)
        assert clash.id == 1

    def test_adjacent_slot_is_free(self):
        assert find_conflict(Interval(_at(12), _at(13)), self.existing) is None

    def test_cancelled_bookings_are_ignored(self):
        assert find_conflict(Interval(_at(14), _at(15)), self.existing) is None

    def test_paid_bookings_still_block(self):
        assert find_conflict(Interval(_at(16, 30), _at(17, 30)), self.existing).id == 3

    def test_naive_stored_times(self):
        stored = [_booking(9, datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 11))]
        assert find_conflict(Interval(_at(10, 30), _at(11, 30)), stored).id == 9


class TestCheckConflict:
    def test_free_slot_returns_hours(self):
        hours = check_conflict(5, Interval(_at(12), _at(14)), [_booking(1, _at(10), _at(12))], max_hours=8)
        assert hours == Decimal(2)

    def test_taken_slot(self):
        with pytest.raises(ConflictException) as exc:
            check_conflict(5, Interval(_at(11), _at(13)), [_booking(1, _at(10), _at(12))], max_hours=8)
        assert exc.value.reason == RejectionReason.SLOT_TAKEN
        assert exc.value.status_code == 409
        assert exc.value.details["conflicting_reservation_id"] == 1

    def test_duration_checked_before_overlap(self):
        with pytest.raises(ValidationException):
            check_conflict(5, Interval(_at(0), _at(12)), [_booking(1, _at(10), _at(12))], max_hours=8)
