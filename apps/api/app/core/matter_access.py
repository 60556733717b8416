"""
Visibility rules per entity, applied the same way by every query.

Matters:
- CLIENT: only matters they own
- CONVEYANCER: only matters assigned to them
- BROKER, ADMIN: all matters

Referrals:
- BROKER: only their own
- CONVEYANCER, ADMIN: all
- CLIENT: none

Invisible matters surface as 404 so existence is not leaked.
"""

from sqlalchemy import ColumnElement, true

from app.core.errors import Forbidden, NotFound
from app.db.enums import Role
from app.db.models import Matter, Referral, User

MATTER_EDITOR_ROLES = (Role.CONVEYANCER, Role.BROKER, Role.ADMIN)
REFERRAL_VIEWER_ROLES = (Role.BROKER, Role.CONVEYANCER, Role.ADMIN)


def matter_visibility_clause(user: User) -> ColumnElement[bool]:
    """SQL filter restricting Matter rows to those the user may see."""
    if user.role == Role.CLIENT.value:
        return Matter.client_user_id == user.id
    if user.role == Role.CONVEYANCER.value:
        return Matter.conveyancer_user_id == user.id
    return true()


def can_view_matter(matter: Matter, user: User) -> bool:
    """Non-raising variant of check_matter_access."""
    if user.role == Role.CLIENT.value:
        return matter.client_user_id == user.id
    if user.role == Role.CONVEYANCER.value:
        return matter.conveyancer_user_id == user.id
    return True


def check_matter_access(matter: Matter | None, user: User) -> Matter:
    """Return the matter if visible, else raise NotFound."""
    if matter is None or not can_view_matter(matter, user):
        raise NotFound("Matter not found")
    return matter


def check_matter_editor(matter: Matter | None, user: User) -> Matter:
    """Visible and the role may modify matters."""
    matter = check_matter_access(matter, user)
    if Role(user.role) not in MATTER_EDITOR_ROLES:
        raise Forbidden("Only conveyancers, brokers and admins can update matters")
    return matter


def referral_visibility_clause(user: User) -> ColumnElement[bool]:
    if Role(user.role) not in REFERRAL_VIEWER_ROLES:
        raise Forbidden("Referrals are not available for this role")
    if user.role == Role.BROKER.value:
        return Referral.broker_user_id == user.id
    return true()


def can_view_referral(referral: Referral, user: User) -> bool:
    if user.role == Role.BROKER.value:
        return referral.broker_user_id == user.id
    return Role(user.role) in REFERRAL_VIEWER_ROLES


def check_referral_access(referral: Referral | None, user: User) -> Referral:
    if referral is None or not can_view_referral(referral, user):
        raise NotFound("Referral not found")
    return referral
