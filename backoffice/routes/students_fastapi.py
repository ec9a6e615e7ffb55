# -*- coding: utf-8 -*-
"""
FastAPI routes for the CRUD of Students.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from backoffice.database import get_db
from backoffice.models.student import Student
from backoffice.schemas.student import StudentCreate, StudentRead, StudentUpdate, StudentPaginated

router = APIRouter(
    tags=["Students"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    db_student = Student(**student.dict())
    db.add(db_student)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Integrity error while saving student: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A student with this e-mail already exists.")
    db.refresh(db_student)
    return db_student


@router.get("", response_model=StudentPaginated)
def read_students(
    skip: int = 0,
    limit: int = 20,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    Lists students ordered by name, optionally filtered by a name search.
    """
    query = db.query(Student)
    if search:
        query = query.filter(Student.name.ilike(f"%{search}%"))

    total = query.count()
    students = query.order_by(Student.name.asc()).offset(skip).limit(limit).all()
    return {"total": total, "students": students}


@router.get("/{student_id}", response_model=StudentRead)
def read_student(student_id: int, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return db_student


@router.put("/{student_id}", response_model=StudentRead)
def update_student(student_id: int, student_update: StudentUpdate, db: Session = Depends(get_db)):
    db_student = db.query(Student).filter(Student.id == student_id).first()
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    for key, value in student_update.dict(exclude_unset=True).items():
        setattr(db_student, key, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A student with this e-mail already exists.")
    db.refresh(db_student)
    return db_student
