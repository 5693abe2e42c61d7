"""
Team Dashboard Routes
Team members, the services they perform and their schedules (Teams plan)
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from slotbook.config.database import get_db
from slotbook.models.business import Business, SubscriptionTier
from slotbook.api.dependencies import get_current_business
from slotbook.schemas.availability import TeamMemberAvailabilityUpsert, TeamMemberAvailabilityResponse
from slotbook.schemas.catalog import (
    TeamMemberCreate,
    TeamMemberUpdate,
    TeamMemberServicesUpdate,
    TeamMemberResponse
)
from slotbook.services.availability.availability_service import AvailabilityService
from slotbook.services.booking.exceptions import BookingError
from slotbook.services.business.business_service import TierService
from slotbook.services.catalog.team_service import TeamService

logger = logging.getLogger(__name__)


def require_teams_plan(business: Business = Depends(get_current_business)) -> Business:
    TierService.require(business, SubscriptionTier.TEAMS.value, "Team management")
    return business


router = APIRouter(tags=["dashboard-team"])


@router.get("", response_model=List[TeamMemberResponse])
def list_team_members(
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    return TeamService.list_members(db, business.id)


@router.post("", response_model=TeamMemberResponse, status_code=201)
def create_team_member(
        data: TeamMemberCreate,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    try:
        return TeamService.create_member(db, business.id, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error creating team member: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create team member")


@router.patch("/{team_member_id}", response_model=TeamMemberResponse)
def update_team_member(
        team_member_id: UUID,
        data: TeamMemberUpdate,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    return TeamService.update_member(db, business.id, team_member_id, data)


@router.delete("/{team_member_id}", status_code=204)
def delete_team_member(
        team_member_id: UUID,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    TeamService.delete_member(db, business.id, team_member_id)


@router.put("/{team_member_id}/services", response_model=TeamMemberResponse)
def set_team_member_services(
        team_member_id: UUID,
        data: TeamMemberServicesUpdate,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    try:
        return TeamService.set_member_services(db, business.id, team_member_id, data.service_ids)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error setting services for team member {team_member_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to update team member services")


@router.get("/{team_member_id}/availability", response_model=List[TeamMemberAvailabilityResponse])
def get_team_member_availability(
        team_member_id: UUID,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    member = TeamService.get_member(db, business.id, team_member_id)
    return AvailabilityService.list_team_member_rules(db, member.id)


@router.put("/{team_member_id}/availability", response_model=TeamMemberAvailabilityResponse)
def update_team_member_availability(
        team_member_id: UUID,
        data: TeamMemberAvailabilityUpsert,
        business: Business = Depends(require_teams_plan),
        db: Session = Depends(get_db)
):
    member = TeamService.get_member(db, business.id, team_member_id)
    try:
        return AvailabilityService.upsert_team_member_rule(db, member, data)
    except (HTTPException, BookingError):
        raise
    except Exception as e:
        logger.error(f"Error saving availability for team member {team_member_id}: {e}", exc_info=True)
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to save team member availability")
