# ============================================================================
# slotbook/services/catalog/team_service.py
# ============================================================================
"""Service for managing team members and the services they perform"""
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from slotbook.models.service import Service
from slotbook.models.team_member import TeamMember, TeamMemberService
from slotbook.schemas.catalog import TeamMemberCreate, TeamMemberUpdate
from slotbook.services.booking.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class TeamService:

    @staticmethod
    def list_members(db: Session, business_id, active_only: bool = False) -> List[TeamMember]:
        query = db.query(TeamMember).filter(TeamMember.business_id == business_id)
        if active_only:
            query = query.filter(TeamMember.is_active == True)
        return query.order_by(TeamMember.name).all()

    @staticmethod
    def list_members_for_service(db: Session, business_id, service_id) -> List[TeamMember]:
        """Active members who perform the given service"""
        return db.query(TeamMember).join(
            TeamMemberService, TeamMemberService.team_member_id == TeamMember.id
        ).filter(
            TeamMember.business_id == business_id,
            TeamMember.is_active == True,
            TeamMemberService.service_id == service_id
        ).order_by(TeamMember.name).all()

    @staticmethod
    def get_member(db: Session, business_id, team_member_id) -> TeamMember:
        member = db.query(TeamMember).filter(
            TeamMember.id == team_member_id,
            TeamMember.business_id == business_id
        ).first()
        if not member:
            raise NotFoundError("Team member not found", field="team_member_id")
        return member

    @staticmethod
    def get_bookable_member(db: Session, business_id, team_member_id, service_id) -> TeamMember:
        """Member who is active and performs service_id"""
        member = TeamService.get_member(db, business_id, team_member_id)
        if not member.is_active:
            raise ValidationError("Team member is not available for booking", field="team_member_id")
        if str(service_id) not in {str(sid) for sid in member.service_ids}:
            raise ValidationError("Team member does not perform this service", field="team_member_id")
        return member

    @staticmethod
    def create_member(db: Session, business_id, data: TeamMemberCreate) -> TeamMember:
        member = TeamMember(
            business_id=business_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            role=data.role,
            is_active=True
        )
        db.add(member)
        db.commit()
        db.refresh(member)

        logger.info(f"Created team member {member.id} for business {business_id}")
        return member

    @staticmethod
    def update_member(db: Session, business_id, team_member_id, data: TeamMemberUpdate) -> TeamMember:
        member = TeamService.get_member(db, business_id, team_member_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "is_active"):
                continue
            setattr(member, field, value)

        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def delete_member(db: Session, business_id, team_member_id):
        """Soft delete; past bookings keep pointing at the member"""
        member = TeamService.get_member(db, business_id, team_member_id)
        member.is_active = False
        db.commit()
        logger.info(f"Deactivated team member {team_member_id}")

    @staticmethod
    def set_member_services(db: Session, business_id, team_member_id, service_ids: List[UUID]) -> TeamMember:
        """Replace the set of services a member performs"""
        member = TeamService.get_member(db, business_id, team_member_id)

        wanted = {str(sid) for sid in service_ids}
        if wanted:
            owned = db.query(Service.id).filter(
                Service.business_id == business_id,
                Service.id.in_(list(service_ids))
            ).all()
            if len(owned) != len(wanted):
                raise ValidationError("Unknown service for this business", field="service_ids")

        member.service_links = [
            link for link in member.service_links if str(link.service_id) in wanted
        ]
        existing = {str(link.service_id) for link in member.service_links}
        for sid in service_ids:
            if str(sid) not in existing:
                member.service_links.append(TeamMemberService(service_id=sid))
                existing.add(str(sid))

        db.commit()
        db.refresh(member)
        logger.info(f"Team member {team_member_id} now performs {len(member.service_links)} services")
        return member
