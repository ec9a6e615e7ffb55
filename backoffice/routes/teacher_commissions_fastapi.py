# -*- coding: utf-8 -*-
"""
FastAPI routes for the teacher commission reports.

Commissions are recalculated from the attendance of every completed meeting,
and each meeting is credited to the teacher that actually taught it
(substitute > actual teacher > class teacher).
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from backoffice import auth
from backoffice.database import get_db
from backoffice.enums import MeetingStatus
from backoffice.models.course_class import CourseClass
from backoffice.models.meeting import ClassMeeting
from backoffice.models.teacher import Teacher
from backoffice.schemas.commission import CommissionReport
from backoffice.services.commission_report import (
    build_summary, commission_period, meeting_commission_entry,
    resolve_meeting_teacher, summarize_by_teacher,
)

router = APIRouter(
    tags=["Teacher Commissions"],
    responses={404: {"description": "Not found"}},
)


def parse_date(value: Optional[str], field: str):
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field} format. Use YYYY-MM-DD",
        )


def completed_meetings_query(db: Session, start=None, end=None):
    """Completed meetings with everything the commission entries need, newest first."""
    query = db.query(ClassMeeting).options(
        joinedload(ClassMeeting.course_class).joinedload(CourseClass.teacher),
        joinedload(ClassMeeting.substitute_teacher),
        joinedload(ClassMeeting.actual_teacher),
        joinedload(ClassMeeting.attendances),
    ).filter(ClassMeeting.status == MeetingStatus.COMPLETED.value)
    if start is not None:
        query = query.filter(ClassMeeting.date >= start)
    if end is not None:
        query = query.filter(ClassMeeting.date < end)
    return query.order_by(ClassMeeting.date.desc(), ClassMeeting.meeting_number.desc())


def _meetings_taught_by(db: Session, teacher_id: int, start, end):
    # The SQL filter only narrows the candidates, the attribution rule decides
    meetings = completed_meetings_query(db, start, end).join(
        CourseClass, ClassMeeting.class_id == CourseClass.id
    ).filter(
        or_(
            CourseClass.teacher_id == teacher_id,
            ClassMeeting.substitute_teacher_id == teacher_id,
            ClassMeeting.actual_teacher_id == teacher_id,
        )
    ).all()
    return [m for m in meetings if getattr(resolve_meeting_teacher(m), "id", None) == teacher_id]


def build_report(meetings, period):
    entries = [meeting_commission_entry(meeting) for meeting in meetings]
    teachers = summarize_by_teacher(entries)
    return {"teachers": teachers, "summary": build_summary(teachers), "period": period}


@router.get("", response_model=CommissionReport)
def read_teacher_commissions(
    teacher_id: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(auth.get_staff_user),
):
    """
    Commission report grouped by teacher, for a date range or a month.
    """
    start, end, period = commission_period(
        parse_date(start_date, "start_date"), parse_date(end_date, "end_date"), month, year
    )
    if teacher_id:
        if db.query(Teacher).filter(Teacher.id == teacher_id).first() is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
        meetings = _meetings_taught_by(db, teacher_id, start, end)
    else:
        meetings = completed_meetings_query(db, start, end).all()
    return build_report(meetings, period)


@router.get("/me", response_model=CommissionReport)
def read_my_commissions(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    teacher: Teacher = Depends(auth.get_current_teacher),
):
    """
    Commission report of the logged-in teacher.
    """
    start, end, period = commission_period(
        parse_date(start_date, "start_date"), parse_date(end_date, "end_date"), month, year
    )
    return build_report(_meetings_taught_by(db, teacher.id, start, end), period)
