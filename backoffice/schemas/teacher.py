# -*- coding: utf-8 -*-
"""
Pydantic schemas for the Teacher entity.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TeacherBase(BaseModel):
    name: str = Field(..., max_length=100)
    whatsapp: Optional[str] = Field(None, max_length=20)
    education: Optional[str] = Field(None, max_length=200)
    specialization: Optional[str] = Field(None, max_length=100)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    whatsapp: Optional[str] = Field(None, max_length=20)
    education: Optional[str] = Field(None, max_length=200)
    specialization: Optional[str] = Field(None, max_length=100)


class TeacherRead(TeacherBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
