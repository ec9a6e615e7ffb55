# -*- coding: utf-8 -*-
"""
Pydantic schemas for recording class attendance.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class AttendanceRecordIn(BaseModel):
    student_id: int
    status: str  # HADIR, TIDAK_HADIR, TERLAMBAT or IZIN
    notes: Optional[str] = None


class ClassAttendanceCreate(BaseModel):
    class_id: int
    teacher_present: bool = True
    is_main_teacher_absent: bool = False
    substitute_teacher_id: Optional[int] = None
    teacher_notes: Optional[str] = None
    topic: Optional[str] = Field(None, max_length=200)
    attendance_records: List[AttendanceRecordIn]


class CommissionCalculationRead(BaseModel):
    amount: float
    breakdown: str
    eligible_student_count: int
    type: str


class ClassAttendanceResult(BaseModel):
    success: bool
    message: str
    meeting_id: int
    meeting_number: int
    present_count: int
    commission_calculation: CommissionCalculationRead


class StudentAttendanceRead(BaseModel):
    id: int
    status: str
    notes: Optional[str] = None
    meeting_id: int
    meeting_number: int
    meeting_date: datetime
    class_id: int
    class_name: str
