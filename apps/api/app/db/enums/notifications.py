"""Notification template and delivery enums."""

from enum import Enum


class NotificationChannel(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"  # No adapter; attempts are logged as failed


class NotificationTrigger(str, Enum):
    """Domain events that can fire a template."""

    MATTER_CREATED = "matter_created"
    TASK_COMPLETED = "task_completed"
    DOCUMENT_UPLOADED = "document_uploaded"
    SETTLEMENT_DATE_SET = "settlement_date_set"
    MILESTONE_REACHED = "milestone_reached"
    REFERRAL_CREATED = "referral_created"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
