"""Organisation enums."""

from enum import Enum


class OrganisationRole(str, Enum):
    """Role of a member inside a brokerage organisation."""

    OWNER = "OWNER"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"

    @property
    def can_manage_members(self) -> bool:
        return self in (OrganisationRole.OWNER, OrganisationRole.MANAGER)
