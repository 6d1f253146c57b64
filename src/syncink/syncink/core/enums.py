from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class AttendanceKind(str, Enum):
    """Attendance kinds as stored in the database."""

    PRESENT = "Present"
    ABSENT = "Absent"
    AUTO_ABSENT = "Auto-Absent"


class RequestStatus(str, Enum):
    """Review states of a retroactive request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
