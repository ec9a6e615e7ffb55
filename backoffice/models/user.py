# -*- coding: utf-8 -*-
"""
SQLAlchemy model for back office users (administrators, staff and teachers).
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from backoffice.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(100))
    hashed_password = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="pending")
    is_active = Column(Boolean, default=True)

    # Set for users with the "teacher" role
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True, unique=True)

    teacher = relationship("Teacher", back_populates="user")
