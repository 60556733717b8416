"""Referral and commission payment enums."""

from enum import Enum


class ReferralChannel(str, Enum):
    """How a referral reached the platform."""

    PORTAL = "PORTAL"
    SMS = "SMS"
    QR = "QR"  # Public landing page resolved by qr_token


class ReferralStatus(str, Enum):
    PENDING = "Pending"
    CONVERTED = "Converted"  # Matter created for the client
    SETTLED = "Settled"


class PaymentStatus(str, Enum):
    """Commission payout status."""

    PENDING = "pending"
    PROCESSING = "processing"
    SETTLED = "settled"  # settled_at is stamped
    FAILED = "failed"
