"""Organisation service - brokerage teams and membership."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, ValidationError
from app.db.enums import OrganisationRole
from app.db.models import Organisation, OrganisationMember, User
from app.schemas.organisation import MemberAdd, OrganisationCreate
from app.services import user_service


def get_membership_for_user(db: Session, user_id: UUID) -> OrganisationMember | None:
    return (
        db.query(OrganisationMember)
        .filter(OrganisationMember.user_id == user_id)
        .order_by(OrganisationMember.created_at)
        .first()
    )


def list_members(db: Session, org_id: UUID) -> list[tuple[OrganisationMember, User]]:
    return (
        db.query(OrganisationMember, User)
        .join(User, User.id == OrganisationMember.user_id)
        .filter(OrganisationMember.organisation_id == org_id)
        .order_by(OrganisationMember.created_at)
        .all()
    )


def get_my_organisation(
    db: Session, user: User
) -> tuple[Organisation, OrganisationMember, list[tuple[OrganisationMember, User]]]:
    membership = get_membership_for_user(db, user.id)
    if not membership:
        raise NotFound("You are not a member of an organisation")
    org = db.get(Organisation, membership.organisation_id)
    return org, membership, list_members(db, org.id)


def create_organisation(db: Session, user: User, data: OrganisationCreate) -> Organisation:
    """Create an organisation with the caller as OWNER."""
    if get_membership_for_user(db, user.id):
        raise ValidationError("You already belong to an organisation")

    org = Organisation(name=data.name, type=data.type)
    db.add(org)
    db.flush()
    db.add(
        OrganisationMember(
            organisation_id=org.id,
            user_id=user.id,
            role=OrganisationRole.OWNER.value,
        )
    )
    db.commit()
    db.refresh(org)
    return org


def add_member(db: Session, user: User, org_id: UUID, data: MemberAdd) -> OrganisationMember:
    """Add an existing user to the organisation. OWNER/MANAGER only."""
    org = db.get(Organisation, org_id)
    if not org:
        raise NotFound("Organisation not found")

    caller = (
        db.query(OrganisationMember)
        .filter(
            OrganisationMember.organisation_id == org_id,
            OrganisationMember.user_id == user.id,
        )
        .first()
    )
    if not caller or not OrganisationRole(caller.role).can_manage_members:
        raise Forbidden("Only owners and managers can add members")
    if data.role == OrganisationRole.OWNER and caller.role != OrganisationRole.OWNER.value:
        raise Forbidden("Only owners can add owners")

    member_user = user_service.get_user_by_email(db, data.email)
    if not member_user:
        raise NotFound("User not found")
    if get_membership_for_user(db, member_user.id):
        raise ValidationError("User already belongs to an organisation", field="email")

    member = OrganisationMember(
        organisation_id=org_id,
        user_id=member_user.id,
        role=data.role.value,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member
