# -*- coding: utf-8 -*-
"""
SQLAlchemy models for class meetings and teacher attendance.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backoffice.database import Base


class ClassMeeting(Base):
    __tablename__ = "class_meetings"
    __table_args__ = (UniqueConstraint("class_id", "meeting_number", name="uq_class_meeting_number"),)

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    meeting_number = Column(Integer, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    topic = Column(String(200), nullable=True)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    notes = Column(Text, nullable=True)

    # Who taught: substitute (main teacher absent) and the actual teacher recorded at attendance time
    substitute_teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True)
    actual_teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True)

    calculated_commission = Column(Float, nullable=True)
    commission_breakdown = Column(Text, nullable=True)

    course_class = relationship("CourseClass", back_populates="meetings")
    substitute_teacher = relationship("Teacher", foreign_keys=[substitute_teacher_id])
    actual_teacher = relationship("Teacher", foreign_keys=[actual_teacher_id])
    attendances = relationship("Attendance", back_populates="meeting", cascade="all, delete-orphan")
    teacher_attendances = relationship("TeacherAttendance", back_populates="meeting", cascade="all, delete-orphan")


class TeacherAttendance(Base):
    __tablename__ = "teacher_attendances"

    id = Column(Integer, primary_key=True, index=True)
    class_meeting_id = Column(Integer, ForeignKey("class_meetings.id"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    marked_at = Column(DateTime, default=datetime.utcnow)

    meeting = relationship("ClassMeeting", back_populates="teacher_attendances")
    teacher = relationship("Teacher")
