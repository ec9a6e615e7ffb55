# -*- coding: utf-8 -*-
"""
User administration, restricted to administrators.

A user with the "teacher" role must be linked to a Teacher to see their own
commissions.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backoffice import database
from backoffice.auth import get_admin_user, get_password_hash
from backoffice.enums import UserRole
from backoffice.models.teacher import Teacher
from backoffice.models.user import User
from backoffice.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(
    prefix="/api/v1/users",
    tags=["Users"],
    dependencies=[Depends(get_admin_user)]
)

ROLES = {role.value for role in UserRole}


def _check_role_and_teacher(db: Session, role, teacher_id):
    if role is not None and role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    if teacher_id is not None:
        if db.query(Teacher).filter(Teacher.id == teacher_id).first() is None:
            raise HTTPException(status_code=404, detail="Teacher not found")
        if db.query(User).filter(User.teacher_id == teacher_id).first():
            raise HTTPException(status_code=400, detail="This teacher is already linked to a user")


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(database.get_db)):
    if db.query(User).filter(User.email == user.email).first():
        raise HTTPException(status_code=400, detail="E-mail already registered")
    if db.query(User).filter(User.username == user.username).first():
        raise HTTPException(status_code=400, detail="Username already registered")
    _check_role_and_teacher(db, user.role, user.teacher_id)

    db_user = User(
        email=user.email,
        username=user.username,
        name=user.name,
        hashed_password=get_password_hash(user.password),
        role=user.role,
        teacher_id=user.teacher_id,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


@router.get("", response_model=List[UserRead])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(database.get_db)):
    return db.query(User).offset(skip).limit(limit).all()


@router.put("/{user_id}", response_model=UserRead)
def update_user(user_id: int, user: UserUpdate, db: Session = Depends(database.get_db)):
    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    update_data = user.dict(exclude_unset=True)
    teacher_id = update_data.get("teacher_id")
    _check_role_and_teacher(
        db, update_data.get("role"), teacher_id if teacher_id != db_user.teacher_id else None
    )

    password = update_data.pop("password", None)
    if password:
        db_user.hashed_password = get_password_hash(password)

    for key, value in update_data.items():
        setattr(db_user, key, value)

    db.commit()
    db.refresh(db_user)
    return db_user
