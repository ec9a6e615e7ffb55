# -*- coding: utf-8 -*-
"""
Closed value sets shared by models, schemas and the calculators.

The database and the HTTP API keep the external (Indonesian) attendance codes;
``AttendanceStatus.parse`` is the single place where they become enum members.
"""
import enum

from backoffice.errors import InvalidInput, InvalidPolicy


class AttendanceStatus(str, enum.Enum):
    PRESENT = "HADIR"
    ABSENT = "TIDAK_HADIR"
    LATE = "TERLAMBAT"
    EXCUSED = "IZIN"

    @classmethod
    def parse(cls, value, field="status"):
        """Accepts a member or an exact external code ("HADIR")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidInput(f"Invalid attendance status: {value!r}", field=field)

    @property
    def is_commission_eligible(self):
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)

    @property
    def attended(self):
        # Excused students still count as "in the meeting" for recording purposes
        return self is not AttendanceStatus.ABSENT


class CommissionType(str, enum.Enum):
    BY_CLASS = "BY_CLASS"
    BY_STUDENT = "BY_STUDENT"

    @classmethod
    def parse(cls, value, field="commission_type"):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidPolicy(
            f"Invalid commission type: {value!r}. Must be 'BY_CLASS' or 'BY_STUDENT'",
            field=field,
        )


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value, field="status"):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidInput(f"Invalid payment status: {value!r}", field=field)


class MeetingStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ResetType(str, enum.Enum):
    PAYMENT = "payment"
    DISMISS = "dismiss"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    STAFF = "staff"
    TEACHER = "teacher"
    PENDING = "pending"
