# -*- coding: utf-8 -*-
"""
SQLAlchemy models for student payments and their transactions.
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from backoffice.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, unique=True, index=True)
    total_amount = Column(Float, nullable=False)
    paid_amount = Column(Float, nullable=False, default=0.0)
    remaining_amount = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, partial, completed
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    reminder_dismissed_at = Column(DateTime, nullable=True)
    reminder_dismissed_by = Column(String(100), nullable=True)

    student = relationship("Student", back_populates="payments")
    transactions = relationship(
        "PaymentTransaction", back_populates="payment",
        cascade="all, delete-orphan", order_by="PaymentTransaction.payment_date.desc()",
    )


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    payment_method = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(100), nullable=True)

    payment = relationship("Payment", back_populates="transactions")
