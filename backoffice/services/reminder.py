# -*- coding: utf-8 -*-
"""
Payment reminder cycle.

A student that still owes money sees a reminder from the first meeting on,
until something resets the clock: a payment made after the first meeting (or
in the last seven days), or a staff member dismissing the reminder. After a
reset the reminder comes back once three more meetings have taken place, and
stays until the next reset or until the payment is completed.

``evaluate_reminder`` takes the current time as an argument: the seven-day
window moves with it, so the same stored data can give a different decision
on a later day.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import math
from decimal import Decimal
from numbers import Real
from typing import Iterable, List, Optional

from backoffice.enums import PaymentStatus, ResetType
from backoffice.errors import InvalidInput
from backoffice.services.formatting import format_currency, format_date

REMINDER_CYCLE_MEETINGS = 3
RECENT_PAYMENT_WINDOW = timedelta(days=7)

_MISSING = object()


@dataclass
class ReminderDecision:
    should_show_reminder: bool
    reason: str
    student_id: Optional[int] = None
    total_meetings: int = 0
    meetings_since_reset: int = 0
    last_reset_date: Optional[datetime] = None
    reset_type: Optional[ResetType] = None
    remaining_amount: Optional[float] = None

    def to_dict(self):
        return {
            "student_id": self.student_id,
            "should_show_reminder": self.should_show_reminder,
            "reason": self.reason,
            "total_meetings": self.total_meetings,
            "meetings_since_reset": self.meetings_since_reset,
            "last_reset_date": self.last_reset_date.isoformat() if self.last_reset_date else None,
            "reset_type": self.reset_type.value if self.reset_type else None,
            "remaining_amount": self.remaining_amount,
        }


def _field(obj, name, source, default=_MISSING):
    if isinstance(obj, Mapping):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    if value is _MISSING:
        raise InvalidInput(f"{source} is missing '{name}'", field=f"{source}.{name}")
    return value


def _as_datetime(value, field):
    # Aware datetimes are compared in naive UTC, like the values stored by the models
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise InvalidInput(f"{field} must be a date or datetime, got: {value!r}", field=field)


def _as_amount(value, field):
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidInput(f"{field} must be a number, got: {value!r}", field=field)
    if not math.isfinite(value):
        raise InvalidInput(f"{field} must be a finite number, got: {value}", field=field)
    return value


def _meeting_dates(attendance_dates) -> List[datetime]:
    if attendance_dates is None or isinstance(attendance_dates, (str, bytes, Mapping)):
        raise InvalidInput("Attendance dates must be a list of dates", field="attendance_dates")
    return sorted(_as_datetime(value, f"attendance_dates[{i}]") for i, value in enumerate(attendance_dates))


def _payment_dates(transactions) -> List[datetime]:
    if transactions is None:
        return []
    if isinstance(transactions, (str, bytes, Mapping)):
        raise InvalidInput("Transactions must be a list", field="transactions")
    return [
        _as_datetime(_field(tx, "payment_date", f"transactions[{i}]"), f"transactions[{i}].payment_date")
        for i, tx in enumerate(transactions)
    ]


def latest_payment_reset(payment_dates: Iterable[datetime], first_meeting: Optional[datetime], now: datetime):
    """
    Returns the date of the latest payment that resets the cycle, or None.

    A payment counts when it falls on a later calendar day than the first
    meeting, or when it was made within RECENT_PAYMENT_WINDOW of ``now``.
    """
    window_start = now - RECENT_PAYMENT_WINDOW
    relevant = [
        paid_at for paid_at in payment_dates
        if paid_at >= window_start
        or (first_meeting is not None and paid_at.date() > first_meeting.date())
    ]
    return max(relevant, default=None)


def _plural(count, word):
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def evaluate_reminder(payment, transactions, attendance_dates, now, student_id=None) -> ReminderDecision:
    """
    Decides whether the payment reminder should be shown for a student.

    Args:
        payment: the student's payment (object or dict) or None
        transactions: the payment's transactions, each with ``payment_date``
        attendance_dates: the dates of every meeting the student has an
            attendance record for, any status
        now: current time (naive UTC or aware)
        student_id: copied into the decision

    Raises:
        InvalidInput: for malformed payment, transaction or date data
    """
    if not isinstance(now, datetime):
        raise InvalidInput(f"now must be a datetime, got: {now!r}", field="now")
    now = _as_datetime(now, "now")

    if payment is None:
        return ReminderDecision(False, "No payment found", student_id=student_id)

    status = PaymentStatus.parse(_field(payment, "status", "payment"), field="payment.status")
    remaining = _as_amount(_field(payment, "remaining_amount", "payment"), "payment.remaining_amount")

    if status is PaymentStatus.COMPLETED:
        return ReminderDecision(
            False, "Payment completed (paid in full)",
            student_id=student_id, remaining_amount=remaining,
        )

    meeting_dates = _meeting_dates(attendance_dates)
    total_meetings = len(meeting_dates)

    if remaining <= 0:
        return ReminderDecision(
            False, "Payment completed (no remaining amount)",
            student_id=student_id, total_meetings=total_meetings, remaining_amount=remaining,
        )

    first_meeting = meeting_dates[0] if meeting_dates else None
    last_reset_date = latest_payment_reset(_payment_dates(transactions), first_meeting, now)
    reset_type = ResetType.PAYMENT if last_reset_date else None

    dismissed_at = _field(payment, "reminder_dismissed_at", "payment", default=None)
    if dismissed_at is not None:
        dismissed_at = _as_datetime(dismissed_at, "payment.reminder_dismissed_at")
        # A payment on the same instant wins the tie
        if last_reset_date is None or dismissed_at > last_reset_date:
            last_reset_date = dismissed_at
            reset_type = ResetType.DISMISS

    if last_reset_date is not None:
        meetings_since_reset = sum(1 for held_at in meeting_dates if held_at > last_reset_date)
    else:
        meetings_since_reset = total_meetings

    decision = ReminderDecision(
        False, "",
        student_id=student_id,
        total_meetings=total_meetings,
        meetings_since_reset=meetings_since_reset,
        last_reset_date=last_reset_date,
        reset_type=reset_type,
        remaining_amount=remaining,
    )

    if total_meetings == 0:
        decision.reason = "No meetings yet, next reminder at meeting 1"
        return decision

    if last_reset_date is None:
        decision.should_show_reminder = True
        decision.reason = (
            f"Meeting {total_meetings} - reminder active since first meeting, "
            f"remaining: {format_currency(remaining)}"
        )
        return decision

    since = f"since last {reset_type.value} ({format_date(last_reset_date)})"
    if meetings_since_reset == 0:
        decision.reason = f"0 meetings {since}, next reminder at {REMINDER_CYCLE_MEETINGS} meetings"
    elif meetings_since_reset >= REMINDER_CYCLE_MEETINGS:
        decision.should_show_reminder = True
        decision.reason = (
            f"{_plural(meetings_since_reset, 'meeting')} {since}, reminder triggered, "
            f"remaining: {format_currency(remaining)}"
        )
    else:
        meetings_until_next = REMINDER_CYCLE_MEETINGS - meetings_since_reset
        decision.reason = (
            f"{_plural(meetings_since_reset, 'meeting')} {since}, "
            f"{meetings_until_next} more {'meeting' if meetings_until_next == 1 else 'meetings'} until next reminder"
        )
    return decision
