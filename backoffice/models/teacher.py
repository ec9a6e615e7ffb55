# -*- coding: utf-8 -*-
"""
SQLAlchemy model for the Teacher entity.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from backoffice.database import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    whatsapp = Column(String(20), nullable=True)
    education = Column(String(200), nullable=True)
    specialization = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    classes = relationship("CourseClass", back_populates="teacher")
    user = relationship("User", back_populates="teacher", uselist=False)
