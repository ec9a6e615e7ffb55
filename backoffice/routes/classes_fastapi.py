# -*- coding: utf-8 -*-
"""
FastAPI routes for the CRUD of Classes, their enrolments and meetings.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload
import logging

from backoffice.database import get_db
from backoffice.models.course_class import CourseClass, ClassStudent
from backoffice.models.meeting import ClassMeeting
from backoffice.models.student import Student
from backoffice.models.teacher import Teacher
from backoffice.routes.teacher_commissions_fastapi import completed_meetings_query, parse_date
from backoffice.schemas.course_class import (
    ClassCreate, ClassRead, ClassUpdate, EnrollmentCreate, EnrollmentRead, MeetingRead,
)
from backoffice.schemas.commission import ClassCommissionTotals
from backoffice.services.commission import calculate_total_commission, validate_policy
from backoffice.services.commission_report import commission_period, meeting_commission_entry, summarize_by_class
from backoffice.services.formatting import commission_type_label

router = APIRouter(
    tags=["Classes"],
    responses={404: {"description": "Not found"}},
)


def _get_class_or_404(db: Session, class_id: int):
    db_class = db.query(CourseClass).options(
        joinedload(CourseClass.students),
        joinedload(CourseClass.teacher),
    ).filter(CourseClass.id == class_id).first()
    if db_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return db_class


def _check_teacher(db: Session, teacher_id):
    if teacher_id is not None and db.query(Teacher).filter(Teacher.id == teacher_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Teacher with ID {teacher_id} not found")


def _with_counts(db_class):
    db_class.total_students = len(db_class.students)
    db_class.commission_type_label = commission_type_label(db_class.commission_type)
    return db_class


@router.post("", response_model=ClassRead, status_code=status.HTTP_201_CREATED)
def create_class(course_class: ClassCreate, db: Session = Depends(get_db)):
    """
    Creates a class. The commission policy is validated before anything is saved.
    """
    _check_teacher(db, course_class.teacher_id)
    commission_type, commission_amount = validate_policy(
        course_class.commission_type, course_class.commission_amount
    )

    db_class = CourseClass(
        name=course_class.name,
        teacher_id=course_class.teacher_id,
        max_students=course_class.max_students,
        total_meetings=course_class.total_meetings,
        commission_type=commission_type.value,
        commission_amount=commission_amount,
        is_active=course_class.is_active,
    )
    db.add(db_class)
    db.commit()
    db.refresh(db_class)
    logging.info(f"Class {db_class.id} created with policy {db_class.commission_type} {db_class.commission_amount}")
    return _with_counts(db_class)


@router.get("", response_model=List[ClassRead])
def read_classes(
    skip: int = 0,
    limit: int = 100,
    teacher_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(CourseClass).options(
        joinedload(CourseClass.students),
        joinedload(CourseClass.teacher),
    )
    if teacher_id:
        query = query.filter(CourseClass.teacher_id == teacher_id)

    classes = query.order_by(CourseClass.name).offset(skip).limit(limit).all()
    return [_with_counts(c) for c in classes]


@router.get("/{class_id}", response_model=ClassRead)
def read_class(class_id: int, db: Session = Depends(get_db)):
    return _with_counts(_get_class_or_404(db, class_id))


@router.put("/{class_id}", response_model=ClassRead)
def update_class(class_id: int, class_update: ClassUpdate, db: Session = Depends(get_db)):
    db_class = _get_class_or_404(db, class_id)
    update_data = class_update.dict(exclude_unset=True)

    if "teacher_id" in update_data:
        _check_teacher(db, update_data["teacher_id"])

    if "commission_type" in update_data or "commission_amount" in update_data:
        commission_type, commission_amount = validate_policy(
            update_data.get("commission_type", db_class.commission_type),
            update_data.get("commission_amount", db_class.commission_amount),
        )
        update_data["commission_type"] = commission_type.value
        update_data["commission_amount"] = commission_amount

    for key, value in update_data.items():
        setattr(db_class, key, value)

    db.commit()
    db.refresh(db_class)
    return _with_counts(db_class)


@router.post("/{class_id}/students", response_model=EnrollmentRead, status_code=status.HTTP_201_CREATED)
def enroll_student(class_id: int, enrollment: EnrollmentCreate, db: Session = Depends(get_db)):
    """
    Enrols a student in a class.
    """
    db_class = _get_class_or_404(db, class_id)
    if db.query(Student).filter(Student.id == enrollment.student_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    if any(s.student_id == enrollment.student_id for s in db_class.students):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Student is already enrolled in this class")
    if db_class.max_students and len(db_class.students) >= db_class.max_students:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Class is full")

    db_enrollment = ClassStudent(class_id=class_id, student_id=enrollment.student_id)
    db.add(db_enrollment)
    db.commit()
    db.refresh(db_enrollment)
    return db_enrollment


@router.get("/{class_id}/meetings", response_model=List[MeetingRead])
def read_class_meetings(class_id: int, db: Session = Depends(get_db)):
    _get_class_or_404(db, class_id)
    return db.query(ClassMeeting).filter(
        ClassMeeting.class_id == class_id
    ).order_by(ClassMeeting.meeting_number).all()


@router.get("/{class_id}/commissions", response_model=ClassCommissionTotals)
def read_class_commissions(
    class_id: int,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """
    Commission totals of one class, split by the teacher credited for each meeting.

    ``recorded_commission`` sums the amounts stored when each meeting was
    recorded; the other totals follow the current class policy.
    """
    db_class = _get_class_or_404(db, class_id)
    start, end, period = commission_period(
        parse_date(start_date, "start_date"), parse_date(end_date, "end_date"), month, year
    )
    meetings = completed_meetings_query(db, start, end).filter(ClassMeeting.class_id == class_id).all()
    totals = summarize_by_class([meeting_commission_entry(m) for m in meetings])
    recorded = calculate_total_commission(meetings)

    return {
        "class_id": db_class.id,
        "class_name": db_class.name,
        "commission_type": db_class.commission_type,
        "commission_amount": db_class.commission_amount,
        "period": period,
        **totals,
        "recorded_commission": recorded,
    }
