"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Platform roles.

    - CLIENT: Buyer or seller; sees only matters they own
    - BROKER: Refers clients; sees own referrals and all matters
    - CONVEYANCER: Runs the settlement; sees matters assigned to them
    - ADMIN: Platform operator; sees everything
    """

    CLIENT = "CLIENT"
    BROKER = "BROKER"
    CONVEYANCER = "CONVEYANCER"
    ADMIN = "ADMIN"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class VoiStatus(str, Enum):
    """Verification-of-identity progress for a user."""

    NOT_STARTED = "not_started"
    PENDING = "pending"  # Vendor session created, awaiting decision
    VERIFIED = "verified"  # Only set by the vendor webhook
    FAILED = "failed"
