"""Organisations router - brokerage teams."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.db.models import User
from app.schemas.organisation import (
    MemberAdd,
    MemberRead,
    MembershipRead,
    OrganisationCreate,
    OrganisationMeRead,
    OrganisationRead,
)
from app.services import org_service

router = APIRouter()


@router.get("/me", response_model=OrganisationMeRead)
def get_my_organisation(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's organisation, their membership and all members. 404 if none."""
    org, membership, members = org_service.get_my_organisation(db, user)
    return OrganisationMeRead(
        organisation=OrganisationRead.model_validate(org),
        membership=MembershipRead.model_validate(membership),
        members=[
            MemberRead(
                user_id=member_user.id,
                display_name=member_user.display_name,
                email=member_user.email,
                user_role=member_user.role,
                role=member.role,
            )
            for member, member_user in members
        ],
    )


@router.post("", response_model=OrganisationRead, status_code=201)
def create_organisation(
    data: OrganisationCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return org_service.create_organisation(db, user, data)


@router.post("/{org_id}/members", response_model=MembershipRead, status_code=201)
def add_member(
    org_id: UUID,
    data: MemberAdd,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return org_service.add_member(db, user, org_id, data)
