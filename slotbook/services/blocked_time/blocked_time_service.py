# slotbook/services/blocked_time/blocked_time_service.py
"""Holidays, vacations and other ranges during which nothing can be booked"""
from datetime import date, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from slotbook.models.availability import BlockedTime
from slotbook.schemas.availability import BlockedTimeCreate
from slotbook.services.booking.exceptions import NotFoundError, ValidationError
from slotbook.utils.time_utils import combine

logger = logging.getLogger(__name__)


def spans_multiple_days(start, end) -> bool:
    """A range ending exactly at midnight still counts as one day"""
    last_instant = end - timedelta(microseconds=1)
    return last_instant.date() > start.date()


class BlockedTimeService:

    @staticmethod
    def list_blocked_times(
            db: Session,
            business_id,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None
    ) -> List[BlockedTime]:
        query = db.query(BlockedTime).filter(BlockedTime.business_id == business_id)
        if start_date:
            query = query.filter(BlockedTime.end_datetime > combine(start_date, "00:00"))
        if end_date:
            query = query.filter(BlockedTime.start_datetime < combine(end_date + timedelta(days=1), "00:00"))
        return query.order_by(BlockedTime.start_datetime).all()

    @staticmethod
    def create(db: Session, business_id, data: BlockedTimeCreate) -> BlockedTime:
        """Tier checks happen in the API layer before this is called"""
        if data.end_datetime <= data.start_datetime:
            raise ValidationError("end_datetime must be after start_datetime", field="end_datetime")

        blocked = BlockedTime(
            business_id=business_id,
            start_datetime=data.start_datetime,
            end_datetime=data.end_datetime,
            reason=data.reason
        )
        db.add(blocked)
        db.commit()
        db.refresh(blocked)

        logger.info(
            f"Blocked {blocked.start_datetime:%Y-%m-%d %H:%M} - {blocked.end_datetime:%Y-%m-%d %H:%M} "
            f"for business {business_id}"
        )
        return blocked

    @staticmethod
    def delete(db: Session, business_id, blocked_time_id):
        blocked = db.query(BlockedTime).filter(
            BlockedTime.id == blocked_time_id,
            BlockedTime.business_id == business_id
        ).first()
        if not blocked:
            raise NotFoundError("Blocked time not found")

        db.delete(blocked)
        db.commit()
        logger.info(f"Removed blocked time {blocked_time_id}")
