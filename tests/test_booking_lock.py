from datetime import timedelta
from uuid import uuid4

import pytest

from slotbook.services.booking.booking_lock import BookingLockManager, advisory_lock_key
from slotbook.services.booking.exceptions import SlotConflictError

from tests.conftest import TUESDAY


@pytest.fixture
def lock_manager():
    return BookingLockManager(backend="local", timeout=1)


def test_day_locks_are_dropped_after_release(db, lock_manager):
    business_id = uuid4()

    for offset in range(200):
        with lock_manager.acquire(db, business_id, TUESDAY + timedelta(days=offset)):
            assert len(lock_manager._locks) == 1

    assert lock_manager._locks == {}
    assert lock_manager._users == {}


def test_lock_dropped_when_the_work_fails(db, lock_manager):
    with pytest.raises(RuntimeError):
        with lock_manager.acquire(db, uuid4(), TUESDAY):
            raise RuntimeError("insert failed")

    assert lock_manager._locks == {}


def test_busy_day_times_out(db, lock_manager):
    business_id = uuid4()

    with lock_manager.acquire(db, business_id, TUESDAY):
        with pytest.raises(SlotConflictError) as exc_info:
            with lock_manager.acquire(db, business_id, TUESDAY):
                pass
        assert exc_info.value.reason == "busy"
        assert len(lock_manager._locks) == 1

        # Other days of the same business are unaffected
        with lock_manager.acquire(db, business_id, TUESDAY + timedelta(days=1)):
            assert len(lock_manager._locks) == 2

    assert lock_manager._locks == {}


def test_advisory_key_is_stable_signed_64_bit():
    key = advisory_lock_key("booking_lock:abc:2030-01-08")
    assert key == advisory_lock_key("booking_lock:abc:2030-01-08")
    assert -2 ** 63 <= key < 2 ** 63
    assert key != advisory_lock_key("booking_lock:abc:2030-01-09")
