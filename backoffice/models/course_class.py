# -*- coding: utf-8 -*-
"""
SQLAlchemy models for classes and their enrolled students.

The commission policy (commission_type / commission_amount) is fixed per class.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, Float, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backoffice.database import Base


class CourseClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True)
    max_students = Column(Integer, nullable=True)
    total_meetings = Column(Integer, nullable=True)
    completed_meetings = Column(Integer, nullable=False, default=0)
    commission_type = Column(String(20), nullable=False, default="BY_CLASS")
    commission_amount = Column(Float, nullable=False, default=0.0)
    start_date = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True)

    teacher = relationship("Teacher", back_populates="classes")
    students = relationship("ClassStudent", back_populates="course_class", cascade="all, delete-orphan")
    meetings = relationship(
        "ClassMeeting", back_populates="course_class",
        cascade="all, delete-orphan", order_by="ClassMeeting.meeting_number",
    )


class ClassStudent(Base):
    __tablename__ = "class_students"
    __table_args__ = (UniqueConstraint("class_id", "student_id", name="uq_class_student"),)

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    joined_at = Column(DateTime, default=datetime.utcnow)

    course_class = relationship("CourseClass", back_populates="students")
    student = relationship("Student", back_populates="enrollments")
