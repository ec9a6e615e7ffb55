# -*- coding: utf-8 -*-
"""
FastAPI routes for recording class attendance.

Recording the attendance of a class creates its next meeting, stores the
student and teacher attendance and the commission earned for that meeting.
"""
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
import logging

from backoffice.database import get_db
from backoffice.enums import AttendanceStatus, MeetingStatus
from backoffice.errors import InvalidInput
from backoffice.models.attendance import Attendance
from backoffice.models.course_class import CourseClass
from backoffice.models.meeting import ClassMeeting, TeacherAttendance
from backoffice.models.student import Student
from backoffice.models.teacher import Teacher
from backoffice.schemas.attendance import ClassAttendanceCreate, ClassAttendanceResult, StudentAttendanceRead
from backoffice.services.commission import calculate_commission

router = APIRouter(
    tags=["Attendance"],
    responses={404: {"description": "Not found"}},
)


@router.post("/class", response_model=ClassAttendanceResult, status_code=status.HTTP_201_CREATED)
def record_class_attendance(payload: ClassAttendanceCreate, db: Session = Depends(get_db)):
    """
    Records the attendance of a whole class as its next meeting.

    At least one student must be present, late or excused. When the main
    teacher is absent a substitute teacher is required, and the meeting (and
    its commission) is credited to the substitute.
    """
    statuses = [
        AttendanceStatus.parse(record.status, field=f"attendance_records[{i}].status")
        for i, record in enumerate(payload.attendance_records)
    ]
    seen = set()
    for i, record in enumerate(payload.attendance_records):
        if record.student_id in seen:
            raise InvalidInput(
                f"Student {record.student_id} is listed more than once",
                field=f"attendance_records[{i}].student_id",
            )
        seen.add(record.student_id)

    if payload.is_main_teacher_absent and not payload.substitute_teacher_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A substitute teacher is required when the main teacher is absent",
        )
    if not any(s.attended for s in statuses):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one student must attend to record a meeting",
        )

    db_class = db.query(CourseClass).options(
        joinedload(CourseClass.students)
    ).filter(CourseClass.id == payload.class_id).first()
    if db_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")

    substitute_id = payload.substitute_teacher_id if payload.is_main_teacher_absent else None
    if substitute_id and db.query(Teacher).filter(Teacher.id == substitute_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Substitute teacher not found")

    now = datetime.utcnow()
    meeting_number = (db_class.completed_meetings or 0) + 1
    attended_count = sum(1 for s in statuses if s.attended)

    meeting = ClassMeeting(
        class_id=db_class.id,
        meeting_number=meeting_number,
        date=now,
        topic=payload.topic or f"Meeting {meeting_number}",
        status=MeetingStatus.COMPLETED.value,
        substitute_teacher_id=substitute_id,
        actual_teacher_id=substitute_id or db_class.teacher_id,
        notes=f"Attendance recorded: {attended_count} students attended",
    )
    db.add(meeting)

    enrolled = {s.student_id for s in db_class.students}
    recorded = []
    present_count = 0
    for record, attendance_status in zip(payload.attendance_records, statuses):
        if record.student_id not in enrolled:
            logging.warning(f"Student {record.student_id} is not enrolled in class {db_class.id}, skipped")
            continue
        attendance = Attendance(
            student_id=record.student_id,
            status=attendance_status.value,
            notes=record.notes,
            marked_at=now,
        )
        meeting.attendances.append(attendance)
        recorded.append(attendance)
        if attendance_status.attended:
            present_count += 1

    result = calculate_commission(db_class.commission_type, db_class.commission_amount, recorded)
    meeting.calculated_commission = result.amount
    meeting.commission_breakdown = result.breakdown

    if payload.is_main_teacher_absent:
        if db_class.teacher_id:
            meeting.teacher_attendances.append(TeacherAttendance(
                teacher_id=db_class.teacher_id,
                status=AttendanceStatus.ABSENT.value,
                notes="Absent, replaced by a substitute teacher",
                marked_at=now,
            ))
        meeting.teacher_attendances.append(TeacherAttendance(
            teacher_id=substitute_id,
            status=AttendanceStatus.PRESENT.value,
            notes=payload.teacher_notes or "Substituting the main teacher",
            marked_at=now,
        ))
    elif db_class.teacher_id:
        meeting.teacher_attendances.append(TeacherAttendance(
            teacher_id=db_class.teacher_id,
            status=(AttendanceStatus.PRESENT if payload.teacher_present else AttendanceStatus.ABSENT).value,
            notes=payload.teacher_notes,
            marked_at=now,
        ))

    db_class.completed_meetings = meeting_number
    if meeting_number == 1 and db_class.start_date is None:
        db_class.start_date = now

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Could not save meeting {meeting_number} of class {db_class.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This meeting was already recorded, reload the class and try again",
        )
    db.refresh(meeting)

    logging.info(
        f"Meeting {meeting_number} of class {db_class.id} recorded: "
        f"{present_count} attended, commission {result.amount}"
    )
    return {
        "success": True,
        "message": f"Attendance recorded, {present_count} students attended",
        "meeting_id": meeting.id,
        "meeting_number": meeting_number,
        "present_count": present_count,
        "commission_calculation": {
            "amount": result.amount,
            "breakdown": result.breakdown,
            "eligible_student_count": result.eligible_student_count,
            "type": db_class.commission_type,
        },
    }


@router.get("/students/{student_id}", response_model=List[StudentAttendanceRead])
def read_student_attendance(student_id: int, db: Session = Depends(get_db)):
    """
    Attendance history of a student, newest meeting first.
    """
    if db.query(Student).filter(Student.id == student_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    records = db.query(Attendance).options(
        joinedload(Attendance.meeting).joinedload(ClassMeeting.course_class)
    ).join(ClassMeeting, Attendance.class_meeting_id == ClassMeeting.id).filter(
        Attendance.student_id == student_id
    ).order_by(ClassMeeting.date.desc()).all()

    return [
        {
            "id": r.id,
            "status": r.status,
            "notes": r.notes,
            "meeting_id": r.meeting.id,
            "meeting_number": r.meeting.meeting_number,
            "meeting_date": r.meeting.date,
            "class_id": r.meeting.course_class.id,
            "class_name": r.meeting.course_class.name,
        }
        for r in records
    ]
