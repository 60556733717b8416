"""Pydantic schemas for organisations."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.db.enums import OrganisationRole, Role
from app.schemas.base import CamelModel


class OrganisationCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field("BROKERAGE", max_length=50)


class MemberAdd(CamelModel):
    email: EmailStr
    role: OrganisationRole = OrganisationRole.MEMBER


class OrganisationRead(CamelModel):
    id: UUID
    name: str
    type: str
    created_at: datetime


class MembershipRead(CamelModel):
    id: UUID
    organisation_id: UUID
    user_id: UUID
    role: OrganisationRole
    created_at: datetime


class MemberRead(CamelModel):
    """Membership joined with the member's user record."""
    user_id: UUID
    display_name: str
    email: str
    user_role: Role
    role: OrganisationRole


class OrganisationMeRead(CamelModel):
    organisation: OrganisationRead
    membership: MembershipRead
    members: list[MemberRead]
