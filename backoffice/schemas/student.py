# -*- coding: utf-8 -*-
"""
Pydantic schemas for the Student entity.
"""
from pydantic import BaseModel, EmailStr, Field, validator
from typing import List, Optional
from datetime import datetime


class StudentBase(BaseModel):
    name: str = Field(..., max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)

    @validator("email", pre=True)
    def empty_email_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)


class StudentRead(StudentBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentPaginated(BaseModel):
    total: int
    students: List[StudentRead]
