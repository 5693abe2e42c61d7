# slotbook/api/v1/dashboard/services.py
"""
Service Management API Endpoints
Handles CRUD operations for the services a business offers
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from slotbook.config.database import get_db
from slotbook.models.business import Business
from slotbook.api.dependencies import get_current_business
from slotbook.schemas.catalog import ServiceCreate, ServiceUpdate, ServiceResponse
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.catalog.service_catalog_service import ServiceCatalogService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-services"])


@router.get("", response_model=List[ServiceResponse])
def list_services(
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """All services, including deactivated ones"""
    return ServiceCatalogService.list_services(db, business.id)


@router.post("", response_model=ServiceResponse, status_code=201)
def create_service(
        data: ServiceCreate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        return ServiceCatalogService.create_service(db, business.id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error creating service: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create service")


@router.patch("/{service_id}", response_model=ServiceResponse)
def update_service(
        service_id: UUID,
        data: ServiceUpdate,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    try:
        return ServiceCatalogService.update_service(db, business.id, service_id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error updating service {service_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update service")


@router.delete("/{service_id}")
def delete_service(
        service_id: UUID,
        business: Business = Depends(get_current_business),
        db: Session = Depends(get_db)
):
    """
    Delete a service. Services that bookings still reference are only
    deactivated.
    """
    try:
        outcome = ServiceCatalogService.delete_service(db, business.id, service_id)
        return {"status": outcome, "service_id": str(service_id)}
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error deleting service {service_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to delete service")
