# -*- coding: utf-8 -*-
"""
Teacher commission calculation.

Two policies exist, configured per class:

- BY_CLASS: a flat amount for every meeting that had at least one student
  present or late.
- BY_STUDENT: the amount multiplied by the number of students present or late.

Absent (TIDAK_HADIR) and excused (IZIN) students never count.
"""
from collections.abc import Mapping
from dataclasses import dataclass
import math
from decimal import Decimal
from numbers import Real
from typing import Iterable, Union

from backoffice.enums import AttendanceStatus, CommissionType
from backoffice.errors import InvalidAmount, InvalidInput
from backoffice.services.formatting import format_currency

NO_ELIGIBLE_STUDENTS = "no students present or late"


@dataclass(frozen=True)
class CommissionResult:
    amount: Union[int, float, Decimal]
    breakdown: str
    eligible_student_count: int

    def to_dict(self):
        return {
            "amount": self.amount,
            "breakdown": self.breakdown,
            "eligible_student_count": self.eligible_student_count,
        }


def is_valid_commission_type(value) -> bool:
    return isinstance(value, str) and value in {t.value for t in CommissionType}


def _validate_amount(amount):
    if isinstance(amount, bool) or not isinstance(amount, (Real, Decimal)):
        raise InvalidAmount(f"Commission amount must be a number, got: {amount!r}", field="commission_amount")
    if not math.isfinite(amount):
        raise InvalidAmount(f"Commission amount must be a finite number, got: {amount}", field="commission_amount")
    if amount < 0:
        raise InvalidAmount(f"Commission amount must be non-negative, got: {amount}", field="commission_amount")
    return amount


def validate_policy(commission_type, commission_amount):
    """Returns the parsed (CommissionType, amount) of a class commission policy."""
    return CommissionType.parse(commission_type), _validate_amount(commission_amount)


def _record_status(record, index) -> AttendanceStatus:
    if isinstance(record, Mapping):
        status = record.get("status")
    else:
        status = getattr(record, "status", None)
    if status is None:
        raise InvalidInput(f"Attendance record {index} has no status", field=f"attendance_records[{index}].status")
    return AttendanceStatus.parse(status, field=f"attendance_records[{index}].status")


def count_eligible_students(attendance_records) -> int:
    if not isinstance(attendance_records, (list, tuple)):
        raise InvalidInput("Attendance records must be an array", field="attendance_records")
    return sum(
        1 for index, record in enumerate(attendance_records)
        if _record_status(record, index).is_commission_eligible
    )


def calculate_commission(commission_type, commission_amount, attendance_records) -> CommissionResult:
    """
    Calculates the commission earned for one meeting.

    Args:
        commission_type: 'BY_CLASS' or 'BY_STUDENT' (or a CommissionType)
        commission_amount: base amount, per meeting or per student
        attendance_records: list of records (objects or dicts) with a ``status``

    Returns:
        CommissionResult with the amount, a readable breakdown and the number
        of students that counted.

    Raises:
        InvalidPolicy, InvalidAmount, InvalidInput
    """
    policy, amount = validate_policy(commission_type, commission_amount)
    eligible_count = count_eligible_students(attendance_records)

    if eligible_count == 0:
        return CommissionResult(amount=0, breakdown=NO_ELIGIBLE_STUDENTS, eligible_student_count=0)

    if policy is CommissionType.BY_CLASS:
        return CommissionResult(
            amount=amount,
            breakdown=f"Commission per class: {format_currency(amount)}",
            eligible_student_count=eligible_count,
        )

    total = amount * eligible_count
    noun = "student" if eligible_count == 1 else "students"
    return CommissionResult(
        amount=total,
        breakdown=f"{eligible_count} {noun} × {format_currency(amount)} = {format_currency(total)}",
        eligible_student_count=eligible_count,
    )


def calculate_total_commission(meetings: Iterable) -> float:
    """Sums the stored ``calculated_commission`` of meetings; missing values count as zero."""
    total = 0
    for meeting in meetings:
        if isinstance(meeting, Mapping):
            value = meeting.get("calculated_commission")
        else:
            value = getattr(meeting, "calculated_commission", None)
        total += value or 0
    return total

