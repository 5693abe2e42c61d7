# ===== slotbook/tasks/maintenance_tasks.py =====
import logging

from slotbook.config.celery_config import celery_app
from slotbook.config.database import SessionLocal
from slotbook.services.booking.modification_service import ModificationService
from slotbook.utils.clock import system_clock

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def cleanup_expired_modification_tokens(self):
    """Clear reschedule proposals whose confirmation link has expired (hourly beat)"""
    db = SessionLocal()
    try:
        cleaned = ModificationService.cleanup_expired_modification_tokens(db, system_clock.utcnow())
        return {"status": "success", "cleaned": cleaned}

    except Exception as exc:
        logger.error(f"Expired token cleanup failed: {exc}", exc_info=True)
        db.rollback()
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))

    finally:
        db.close()
