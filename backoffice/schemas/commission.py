# -*- coding: utf-8 -*-
"""
Pydantic schemas for the teacher commission reports.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class TeacherInfo(BaseModel):
    id: Optional[int] = None
    name: str
    education: str = ""
    specialization: str = ""


class ClassInfo(BaseModel):
    id: int
    name: str
    commission_type: str
    commission_amount: float


class MeetingCommissionRead(BaseModel):
    meeting_id: int
    meeting_number: int
    date: datetime
    topic: Optional[str] = None
    teacher: TeacherInfo
    class_: ClassInfo = Field(..., alias="class")
    attending_students: int
    calculated_commission: float
    commission_breakdown: str
    is_substitute: bool

    class Config:
        populate_by_name = True


class TeacherCommissionRead(BaseModel):
    teacher: TeacherInfo
    total_commission: float
    total_meetings: int
    total_students: int
    classes: List[str]
    meetings: List[MeetingCommissionRead]
    by_class_meetings: int
    by_student_meetings: int
    substitute_meetings: int
    average_students_per_meeting: int


class CommissionSummaryRead(BaseModel):
    total_teachers: int
    total_commissions: float
    total_meetings: int
    total_students: int
    average_commission_per_teacher: int
    average_commission_per_meeting: int


class PeriodRead(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None


class CommissionReport(BaseModel):
    teachers: List[TeacherCommissionRead]
    summary: CommissionSummaryRead
    period: PeriodRead


class ClassTeacherTotal(BaseModel):
    teacher_id: Optional[int] = None
    teacher_name: str
    total_commission: float
    total_meetings: int


class ClassCommissionTotals(BaseModel):
    class_id: int
    class_name: str
    commission_type: str
    commission_amount: float
    total_commission: float
    total_meetings: int
    total_students: int
    teachers: List[ClassTeacherTotal]
    recorded_commission: float = 0
    period: PeriodRead
