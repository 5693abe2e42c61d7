"""
Pydantic schemas for services and team members
"""
from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID


class ServiceCreate(BaseModel):
    """Request model for creating a service"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, le=1440, description="Duration in minutes")
    price: Decimal = Field(..., ge=0)
    requires_confirmation: bool = False


class ServiceUpdate(BaseModel):
    """Request model for updating a service"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0, le=1440)
    price: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None
    requires_confirmation: Optional[bool] = None


class ServiceResponse(BaseModel):
    id: UUID
    business_id: UUID
    name: str
    description: Optional[str] = None
    duration: int
    formatted_duration: str
    price: Decimal
    is_active: bool
    requires_confirmation: bool

    class Config:
        from_attributes = True


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = Field(None, max_length=100)


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class TeamMemberServicesUpdate(BaseModel):
    service_ids: List[UUID]


class TeamMemberResponse(BaseModel):
    id: UUID
    business_id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: bool
    service_ids: List[UUID] = []

    class Config:
        from_attributes = True
