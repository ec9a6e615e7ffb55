# -*- coding: utf-8 -*-
"""
FastAPI routes for the CRUD of Teachers.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backoffice.database import get_db
from backoffice.models.teacher import Teacher
from backoffice.schemas.teacher import TeacherCreate, TeacherRead, TeacherUpdate

router = APIRouter(
    tags=["Teachers"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=TeacherRead, status_code=status.HTTP_201_CREATED)
def create_teacher(teacher: TeacherCreate, db: Session = Depends(get_db)):
    db_teacher = Teacher(**teacher.dict())
    db.add(db_teacher)
    db.commit()
    db.refresh(db_teacher)
    return db_teacher


@router.get("", response_model=List[TeacherRead])
def read_teachers(
    skip: int = 0,
    limit: int = 100,
    name: Optional[str] = None,
    specialization: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Lists teachers with optional filters.
    """
    query = db.query(Teacher)
    if name:
        query = query.filter(Teacher.name.ilike(f"%{name}%"))
    if specialization:
        query = query.filter(Teacher.specialization.ilike(f"%{specialization}%"))
    return query.order_by(Teacher.name).offset(skip).limit(limit).all()


@router.get("/{teacher_id}", response_model=TeacherRead)
def read_teacher(teacher_id: int, db: Session = Depends(get_db)):
    db_teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if db_teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    return db_teacher


@router.put("/{teacher_id}", response_model=TeacherRead)
def update_teacher(teacher_id: int, teacher_update: TeacherUpdate, db: Session = Depends(get_db)):
    db_teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if db_teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    for key, value in teacher_update.dict(exclude_unset=True).items():
        setattr(db_teacher, key, value)

    db.commit()
    db.refresh(db_teacher)
    return db_teacher
