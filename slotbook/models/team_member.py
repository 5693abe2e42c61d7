# slotbook/models/team_member.py
"""
Team members, the services they perform and their weekly schedules
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from slotbook.models.base import Base


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    business_id = Column(
        UUID(as_uuid=True),
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(100), nullable=True)  # e.g. "stylist", "therapist"
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    business = relationship("Business", back_populates="team_members")
    service_links = relationship(
        "TeamMemberService",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    availability = relationship(
        "TeamMemberAvailability",
        cascade="all, delete-orphan",
        order_by="TeamMemberAvailability.day_of_week"
    )

    @property
    def service_ids(self):
        return [link.service_id for link in self.service_links]

    def __repr__(self):
        return f"<TeamMember(id={self.id}, name={self.name})>"

    def to_dict(self, include_availability: bool = False):
        data = {
            "id": str(self.id),
            "business_id": str(self.business_id),
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "is_active": self.is_active,
            "service_ids": [str(sid) for sid in self.service_ids],
        }
        if include_availability:
            data["availability"] = [rule.to_dict() for rule in self.availability]
        return data


class TeamMemberService(Base):
    """Which services each team member can perform"""
    __tablename__ = "team_member_services"
    __table_args__ = (
        UniqueConstraint("team_member_id", "service_id", name="uq_team_member_service"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    team_member_id = Column(
        UUID(as_uuid=True),
        ForeignKey("team_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    service_id = Column(
        UUID(as_uuid=True),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )


class TeamMemberAvailability(Base):
    """Individual weekly schedule of a team member"""
    __tablename__ = "team_member_availability"
    __table_args__ = (
        UniqueConstraint("team_member_id", "day_of_week", name="uq_team_member_day"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    team_member_id = Column(
        UUID(as_uuid=True),
        ForeignKey("team_members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    @property
    def is_active_day(self) -> bool:
        return bool(self.is_available)

    def to_dict(self):
        return {
            "id": str(self.id),
            "team_member_id": str(self.team_member_id),
            "day_of_week": self.day_of_week,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_available": self.is_available,
        }
