# -*- coding: utf-8 -*-
"""
SQLAlchemy model for the Student entity.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from backoffice.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=True)
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    enrollments = relationship("ClassStudent", back_populates="student", cascade="all, delete-orphan")
    attendances = relationship("Attendance", back_populates="student")
    payments = relationship("Payment", back_populates="student", order_by="Payment.id")
