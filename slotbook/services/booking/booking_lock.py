# ============================================================================
# slotbook/services/booking/booking_lock.py
# Serialises writes that touch the bookings of one business on one date
# ============================================================================
from contextlib import contextmanager
from datetime import date
from typing import Dict, Optional
import hashlib
import logging
import threading

from redis.exceptions import LockError, RedisError
from sqlalchemy import text
from sqlalchemy.orm import Session

from slotbook.config.redis import RedisKeys, get_sync_redis
from slotbook.config.settings import settings
from slotbook.services.booking.exceptions import SlotConflictError

logger = logging.getLogger(__name__)

LOCK_BUSY_DETAILS = "Another booking for this day is being processed. Please try again."


def advisory_lock_key(lock_name: str) -> int:
    """Stable signed 64-bit key for pg_advisory_xact_lock"""
    digest = hashlib.sha1(lock_name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


class BookingLockManager:
    """
    Per (business, date) critical section around re-read, check and write.

    Always takes an in-process lock. On PostgreSQL it also takes a
    transaction-scoped advisory lock, released by the caller's commit or
    rollback. With the "redis" backend a Redis lock covers several hosts.
    """

    def __init__(self, backend: Optional[str] = None, timeout: Optional[int] = None):
        self.backend = backend or settings.BOOKING_LOCK_BACKEND
        self.timeout = timeout or settings.BOOKING_LOCK_TIMEOUT_SECONDS
        # Entries live only while some thread holds or waits on them
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}
        self._guard = threading.Lock()

    def _check_out(self, name: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            self._users[name] = self._users.get(name, 0) + 1
            return lock

    def _check_in(self, name: str):
        with self._guard:
            self._users[name] -= 1
            if self._users[name] == 0:
                del self._users[name]
                del self._locks[name]

    @contextmanager
    def acquire(self, db: Session, business_id, booking_date: date):
        name = RedisKeys.BOOKING_DAY_LOCK.format(
            business_id=business_id, booking_date=booking_date.isoformat()
        )

        local_lock = self._check_out(name)
        try:
            if not local_lock.acquire(timeout=self.timeout):
                logger.warning(f"Timed out waiting for local lock {name}")
                raise SlotConflictError(details=LOCK_BUSY_DETAILS, reason="busy")

            redis_lock = None
            try:
                if self.backend == "redis":
                    redis_lock = self._acquire_redis(name)

                if db.get_bind().dialect.name == "postgresql":
                    db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": advisory_lock_key(name)})

                yield
            finally:
                if redis_lock is not None:
                    try:
                        redis_lock.release()
                    except LockError as e:
                        # Expired before release; the work already committed or rolled back
                        logger.warning(f"Redis lock {name} was lost before release: {e}")
                local_lock.release()
        finally:
            self._check_in(name)

    def _acquire_redis(self, name: str):
        try:
            lock = get_sync_redis().lock(name, timeout=self.timeout, blocking_timeout=self.timeout)
            acquired = lock.acquire()
        except RedisError as e:
            logger.error(f"Redis lock {name} unavailable: {e}", exc_info=True)
            raise
        if not acquired:
            logger.warning(f"Timed out waiting for redis lock {name}")
            raise SlotConflictError(details=LOCK_BUSY_DETAILS, reason="busy")
        return lock


booking_lock_manager = BookingLockManager()
