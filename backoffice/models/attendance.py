# -*- coding: utf-8 -*-
"""
SQLAlchemy model for student attendance, one row per (meeting, student).

``status`` keeps the external codes: HADIR, TIDAK_HADIR, TERLAMBAT, IZIN.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backoffice.database import Base


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (UniqueConstraint("class_meeting_id", "student_id", name="uq_attendance_meeting_student"),)

    id = Column(Integer, primary_key=True, index=True)
    class_meeting_id = Column(Integer, ForeignKey("class_meetings.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    marked_at = Column(DateTime, default=datetime.utcnow)

    meeting = relationship("ClassMeeting", back_populates="attendances")
    student = relationship("Student", back_populates="attendances")
