# -*- coding: utf-8 -*-
"""
FastAPI routes for student payments, their transactions and the payment
reminder cycle.
"""
from collections import defaultdict
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload
import logging

from backoffice import auth
from backoffice.database import get_db
from backoffice.enums import PaymentStatus
from backoffice.models.attendance import Attendance
from backoffice.models.meeting import ClassMeeting
from backoffice.models.payment import Payment, PaymentTransaction
from backoffice.models.student import Student
from backoffice.models.user import User
from backoffice.schemas.payment import (
    DismissReminderRequest, PaymentCreate, PaymentRead, PaymentTransactionCreate,
    PaymentTransactionRead, ReminderDecisionRead,
)
from backoffice.services.payments import apply_transaction
from backoffice.services.reminder import evaluate_reminder

AUTO_DISMISSED_BY = "system-auto-after-payment"

router = APIRouter(
    tags=["Payments"],
    responses={404: {"description": "Not found"}},
)


def _get_payment_or_404(db: Session, payment_id: int):
    db_payment = db.query(Payment).options(
        joinedload(Payment.transactions)
    ).filter(Payment.id == payment_id).first()
    if db_payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return db_payment


def _attendance_dates(db: Session, student_ids=None):
    """Meeting dates of every attendance record, grouped by student."""
    query = db.query(Attendance.student_id, ClassMeeting.date).join(
        ClassMeeting, Attendance.class_meeting_id == ClassMeeting.id
    )
    if student_ids is not None:
        query = query.filter(Attendance.student_id.in_(student_ids))
    dates = defaultdict(list)
    for student_id, meeting_date in query.all():
        dates[student_id].append(meeting_date)
    return dates


def _reminder_row(student, payment, attendance_dates, now):
    decision = evaluate_reminder(
        payment,
        payment.transactions if payment is not None else [],
        attendance_dates,
        now,
        student_id=student.id,
    )
    row = decision.to_dict()
    row["last_reset_date"] = decision.last_reset_date
    row["student_name"] = student.name
    row["payment_id"] = payment.id if payment is not None else None
    return row


# --- Reminders (declared before /{payment_id}) ---

@router.get("/reminders", response_model=List[ReminderDecisionRead])
def read_reminders(only_active: bool = False, db: Session = Depends(get_db)):
    """
    Reminder decision for every student.

    Pass ``only_active=true`` to get only the students whose reminder is shown.
    """
    now = datetime.utcnow()
    students = db.query(Student).options(
        joinedload(Student.payments).joinedload(Payment.transactions)
    ).order_by(Student.name).all()
    dates = _attendance_dates(db)

    rows = [
        _reminder_row(s, s.payments[0] if s.payments else None, dates.get(s.id, []), now)
        for s in students
    ]
    if only_active:
        rows = [r for r in rows if r["should_show_reminder"]]
    return rows


@router.get("/reminders/{student_id}", response_model=ReminderDecisionRead)
def read_student_reminder(student_id: int, db: Session = Depends(get_db)):
    student = db.query(Student).options(
        joinedload(Student.payments).joinedload(Payment.transactions)
    ).filter(Student.id == student_id).first()
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")

    payment = student.payments[0] if student.payments else None
    dates = _attendance_dates(db, [student_id])
    return _reminder_row(student, payment, dates.get(student_id, []), datetime.utcnow())


# --- CRUD Endpoints ---

@router.post("", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def create_payment(payment: PaymentCreate, db: Session = Depends(get_db)):
    """
    Opens the payment of a student. Each student has a single payment.
    """
    if db.query(Student).filter(Student.id == payment.student_id).first() is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    if db.query(Payment).filter(Payment.student_id == payment.student_id).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This student already has a payment")

    db_payment = Payment(
        student_id=payment.student_id,
        total_amount=payment.total_amount,
        paid_amount=0.0,
        remaining_amount=payment.total_amount,
        status=PaymentStatus.PENDING.value,
    )
    db.add(db_payment)
    db.commit()
    db.refresh(db_payment)
    logging.info(f"Payment {db_payment.id} created for student {db_payment.student_id}: {db_payment.total_amount}")
    return db_payment


@router.get("", response_model=List[PaymentRead])
def read_payments(
    skip: int = 0,
    limit: int = 100,
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    query = db.query(Payment).options(joinedload(Payment.transactions))
    if status_filter:
        query = query.filter(Payment.status == PaymentStatus.parse(status_filter).value)
    return query.order_by(Payment.created_at.desc()).offset(skip).limit(limit).all()


@router.get("/{payment_id}", response_model=PaymentRead)
def read_payment(payment_id: int, db: Session = Depends(get_db)):
    return _get_payment_or_404(db, payment_id)


@router.post(
    "/{payment_id}/transactions",
    response_model=PaymentTransactionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_transaction(
    payment_id: int,
    transaction: PaymentTransactionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth.get_current_active_user),
):
    """
    Registers a transaction and updates the payment balance.

    The reminder is dismissed automatically, so the cycle restarts after
    every payment.
    """
    db_payment = _get_payment_or_404(db, payment_id)
    totals = apply_transaction(db_payment.total_amount, db_payment.paid_amount, transaction.amount)

    now = datetime.utcnow()
    db_transaction = PaymentTransaction(
        payment_id=db_payment.id,
        amount=transaction.amount,
        payment_date=transaction.payment_date or now,
        payment_method=transaction.payment_method,
        notes=transaction.notes,
        created_by=current_user.username,
    )
    db.add(db_transaction)

    db_payment.paid_amount = totals.paid_amount
    db_payment.remaining_amount = totals.remaining_amount
    db_payment.status = totals.status.value
    db_payment.completed_at = now if totals.status is PaymentStatus.COMPLETED else None
    db_payment.reminder_dismissed_at = now
    db_payment.reminder_dismissed_by = AUTO_DISMISSED_BY

    db.commit()
    db.refresh(db_transaction)
    logging.info(
        f"Transaction {db_transaction.id} of {db_transaction.amount} registered on payment {db_payment.id}, "
        f"remaining {db_payment.remaining_amount} ({db_payment.status})"
    )
    return db_transaction


@router.post("/{payment_id}/dismiss-reminder", response_model=PaymentRead)
def dismiss_reminder(
    payment_id: int,
    body: Optional[DismissReminderRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth.get_current_active_user),
):
    db_payment = _get_payment_or_404(db, payment_id)
    dismissed_by = (body.dismissed_by if body else None) or current_user.username

    db_payment.reminder_dismissed_at = datetime.utcnow()
    db_payment.reminder_dismissed_by = dismissed_by
    db.commit()
    db.refresh(db_payment)
    logging.info(f"Reminder of payment {payment_id} dismissed by {dismissed_by}")
    return db_payment


@router.post("/{payment_id}/reset-dismiss", response_model=PaymentRead)
def reset_dismiss(payment_id: int, db: Session = Depends(get_db)):
    db_payment = _get_payment_or_404(db, payment_id)
    db_payment.reminder_dismissed_at = None
    db_payment.reminder_dismissed_by = None
    db.commit()
    db.refresh(db_payment)
    logging.info(f"Reminder dismissal of payment {payment_id} reset")
    return db_payment
