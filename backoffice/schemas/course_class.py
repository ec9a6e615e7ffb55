# -*- coding: utf-8 -*-
"""
Pydantic schemas for classes, enrolments and meetings.

commission_type and the lower bound of commission_amount are checked by the
commission service so that a bad policy is answered the same way everywhere.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from backoffice.config import Config


class ClassBase(BaseModel):
    name: str = Field(..., max_length=100)
    teacher_id: Optional[int] = None
    max_students: Optional[int] = Field(None, gt=0)
    total_meetings: Optional[int] = Field(None, gt=0)
    commission_type: str = "BY_CLASS"
    commission_amount: float = Field(0.0, le=Config.MAX_COMMISSION_AMOUNT)
    is_active: Optional[bool] = True


class ClassCreate(ClassBase):
    pass


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    teacher_id: Optional[int] = None
    max_students: Optional[int] = Field(None, gt=0)
    total_meetings: Optional[int] = Field(None, gt=0)
    commission_type: Optional[str] = None
    commission_amount: Optional[float] = Field(None, le=Config.MAX_COMMISSION_AMOUNT)
    is_active: Optional[bool] = None


class ClassRead(ClassBase):
    id: int
    completed_meetings: int = 0
    start_date: Optional[datetime] = None
    commission_type_label: Optional[str] = None
    total_students: int = 0

    class Config:
        from_attributes = True


class EnrollmentCreate(BaseModel):
    student_id: int


class EnrollmentRead(BaseModel):
    id: int
    class_id: int
    student_id: int
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MeetingRead(BaseModel):
    id: int
    class_id: int
    meeting_number: int
    date: datetime
    topic: Optional[str] = None
    status: str
    substitute_teacher_id: Optional[int] = None
    actual_teacher_id: Optional[int] = None
    calculated_commission: Optional[float] = None
    commission_breakdown: Optional[str] = None

    class Config:
        from_attributes = True
