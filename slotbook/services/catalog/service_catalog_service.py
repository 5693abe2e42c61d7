# ============================================================================
# slotbook/services/catalog/service_catalog_service.py
# ============================================================================
"""Service for managing the bookable services of a business"""
from typing import List
from sqlalchemy.orm import Session
import logging

from slotbook.models.booking import Booking
from slotbook.models.service import Service
from slotbook.schemas.catalog import ServiceCreate, ServiceUpdate
from slotbook.services.booking.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ServiceCatalogService:
    """Handles service CRUD operations"""

    @staticmethod
    def list_services(db: Session, business_id, active_only: bool = False) -> List[Service]:
        query = db.query(Service).filter(Service.business_id == business_id)
        if active_only:
            query = query.filter(Service.is_active == True)
        return query.order_by(Service.name).all()

    @staticmethod
    def get_service(db: Session, business_id, service_id) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.business_id == business_id
        ).first()
        if not service:
            raise NotFoundError("Service not found", field="service_id")
        return service

    @staticmethod
    def get_bookable_service(db: Session, business_id, service_id) -> Service:
        """Service that customers may book right now"""
        service = ServiceCatalogService.get_service(db, business_id, service_id)
        if not service.is_active:
            raise ValidationError("Service is not available for booking", field="service_id")
        return service

    @staticmethod
    def create_service(db: Session, business_id, data: ServiceCreate) -> Service:
        service = Service(
            business_id=business_id,
            name=data.name,
            description=data.description,
            duration=data.duration,
            price=data.price,
            requires_confirmation=data.requires_confirmation,
            is_active=True
        )

        db.add(service)
        db.commit()
        db.refresh(service)

        logger.info(f"Created service {service.id}: {service.name}")
        return service

    @staticmethod
    def update_service(db: Session, business_id, service_id, data: ServiceUpdate) -> Service:
        service = ServiceCatalogService.get_service(db, business_id, service_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "duration", "price", "is_active", "requires_confirmation"):
                continue
            setattr(service, field, value)

        db.commit()
        db.refresh(service)

        logger.info(f"Updated service {service.id}")
        return service

    @staticmethod
    def delete_service(db: Session, business_id, service_id) -> str:
        """
        Hard delete when nothing references the service; otherwise deactivate
        it so existing bookings keep their service.

        Returns "deleted" or "deactivated".
        """
        service = ServiceCatalogService.get_service(db, business_id, service_id)

        referenced = db.query(Booking.id).filter(Booking.service_id == service.id).first() is not None
        if referenced:
            service.is_active = False
            db.commit()
            logger.info(f"Deactivated service {service_id} (referenced by bookings)")
            return "deactivated"

        db.delete(service)
        db.commit()
        logger.info(f"Deleted service {service_id}")
        return "deleted"
