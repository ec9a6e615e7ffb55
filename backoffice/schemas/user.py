# -*- coding: utf-8 -*-
"""
Pydantic schemas for users and login tokens.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    role: str = "pending"


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    teacher_id: Optional[int] = None


class UserRead(UserBase):
    id: int
    is_active: bool = True
    teacher_id: Optional[int] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user_info: UserRead


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, max_length=100)
    role: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6)
    teacher_id: Optional[int] = None
