# -*- coding: utf-8 -*-
"""
Commission reports: who gets credited for a meeting, and totals per teacher
and per class.

The credited teacher of a meeting is, in order of priority, the substitute
teacher of that meeting, the actual-teacher override stored on the meeting,
and finally the teacher assigned to the class. Every report goes through
``resolve_meeting_teacher`` so a meeting is never credited twice.
"""
import math
from collections import OrderedDict
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

from backoffice.enums import CommissionType
from backoffice.errors import InvalidInput
from backoffice.services.commission import calculate_commission


def resolve_meeting_teacher(meeting):
    course_class = getattr(meeting, "course_class", None)
    return (
        getattr(meeting, "substitute_teacher", None)
        or getattr(meeting, "actual_teacher", None)
        or (course_class.teacher if course_class is not None else None)
    )


def round_half_up(value):
    return int(math.floor(value + 0.5))


def _teacher_info(teacher):
    if teacher is None:
        return {"id": None, "name": "No teacher", "education": "", "specialization": ""}
    return {
        "id": teacher.id,
        "name": teacher.name,
        "education": teacher.education or "",
        "specialization": teacher.specialization or "",
    }


def meeting_commission_entry(meeting):
    """Recalculates the commission of a completed meeting and describes it."""
    course_class = meeting.course_class
    teacher = resolve_meeting_teacher(meeting)
    result = calculate_commission(
        course_class.commission_type,
        course_class.commission_amount,
        list(meeting.attendances),
    )
    return {
        "meeting_id": meeting.id,
        "meeting_number": meeting.meeting_number,
        "date": meeting.date,
        "topic": meeting.topic,
        "teacher": _teacher_info(teacher),
        "class": {
            "id": course_class.id,
            "name": course_class.name,
            "commission_type": course_class.commission_type,
            "commission_amount": course_class.commission_amount,
        },
        "attending_students": result.eligible_student_count,
        "calculated_commission": result.amount,
        "commission_breakdown": result.breakdown,
        "is_substitute": getattr(meeting, "substitute_teacher", None) is not None,
    }


def summarize_by_teacher(entries):
    """Groups meeting entries by credited teacher. Meetings without a teacher are left out."""
    grouped = OrderedDict()
    for entry in entries:
        teacher_id = entry["teacher"]["id"]
        if teacher_id is None:
            continue
        data = grouped.setdefault(teacher_id, {
            "teacher": entry["teacher"],
            "total_commission": 0,
            "total_meetings": 0,
            "total_students": 0,
            "classes": [],
            "meetings": [],
            "by_class_meetings": 0,
            "by_student_meetings": 0,
            "substitute_meetings": 0,
        })
        data["total_commission"] += entry["calculated_commission"]
        data["total_meetings"] += 1
        data["total_students"] += entry["attending_students"]
        if entry["class"]["name"] not in data["classes"]:
            data["classes"].append(entry["class"]["name"])
        data["meetings"].append(entry)
        if entry["class"]["commission_type"] == CommissionType.BY_CLASS.value:
            data["by_class_meetings"] += 1
        else:
            data["by_student_meetings"] += 1
        if entry["is_substitute"]:
            data["substitute_meetings"] += 1

    teachers = list(grouped.values())
    for data in teachers:
        data["average_students_per_meeting"] = (
            round_half_up(data["total_students"] / data["total_meetings"]) if data["total_meetings"] else 0
        )
    return teachers


def build_summary(teachers):
    total_commissions = sum(t["total_commission"] for t in teachers)
    total_meetings = sum(t["total_meetings"] for t in teachers)
    return {
        "total_teachers": len(teachers),
        "total_commissions": total_commissions,
        "total_meetings": total_meetings,
        "total_students": sum(t["total_students"] for t in teachers),
        "average_commission_per_teacher": round_half_up(total_commissions / len(teachers)) if teachers else 0,
        "average_commission_per_meeting": round_half_up(total_commissions / total_meetings) if total_meetings else 0,
    }


def summarize_by_class(entries):
    """Totals for the meetings of one class, split by credited teacher."""
    per_teacher = OrderedDict()
    total_commission = 0
    total_students = 0
    for entry in entries:
        total_commission += entry["calculated_commission"]
        total_students += entry["attending_students"]
        teacher = entry["teacher"]
        row = per_teacher.setdefault(teacher["id"], {
            "teacher_id": teacher["id"],
            "teacher_name": teacher["name"],
            "total_commission": 0,
            "total_meetings": 0,
        })
        row["total_commission"] += entry["calculated_commission"]
        row["total_meetings"] += 1
    return {
        "total_commission": total_commission,
        "total_meetings": len(entries),
        "total_students": total_students,
        "teachers": list(per_teacher.values()),
    }


def commission_period(start_date=None, end_date=None, month=None, year=None):
    """
    Resolves the report period.

    Returns ``(start, end, period)`` where ``start``/``end`` are datetimes for
    a half-open interval ``[start, end)`` (or None when unbounded) and
    ``period`` describes the request for the response body.
    """
    period = {"start_date": None, "end_date": None, "month": month, "year": year}

    if start_date and end_date:
        if end_date < start_date:
            raise InvalidInput("end_date must not be before start_date", field="end_date")
        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date, time.min) + timedelta(days=1)
        period["start_date"] = start_date.isoformat()
        period["end_date"] = end_date.isoformat()
        return start, end, period

    if month and year:
        if not 1 <= month <= 12:
            raise InvalidInput(f"Invalid month: {month}", field="month")
        first_day = date(year, month, 1)
        start = datetime.combine(first_day, time.min)
        end = start + relativedelta(months=1)
        period["start_date"] = first_day.isoformat()
        period["end_date"] = (end.date() - timedelta(days=1)).isoformat()
        return start, end, period

    return None, None, period


def previous_month(today):
    last_month = today - relativedelta(months=1)
    return last_month.month, last_month.year
