from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Persisted lifecycle status of a daily attendance record."""

    NOT_STARTED = "not_started"
    INCOMPLETE = "incomplete"
    COMPLETED = "completed"


class LifecycleState(str, Enum):
    """Where an employee stands for the current calendar day."""

    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    CHECKED_IN = "CHECKED_IN"
    COMPLETED = "COMPLETED"


class ApprovalStatus(str, Enum):
    """Admin approval workflow shared by attendance, review items and bonuses."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewPriority(int, Enum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class SubmissionType(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class GeofenceMode(str, Enum):
    """How a failed location rule is handled.

    STRICT rejects the attempt outright, REVIEW records it and sends it to the
    manual review queue.
    """

    STRICT = "strict"
    REVIEW = "review"


class LocationErrorReason(str, Enum):
    POSITION_UNAVAILABLE = "POSITION_UNAVAILABLE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    TIMEOUT = "TIMEOUT"


class SlipStatus(str, Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"
    SENT = "sent"
