# -*- coding: utf-8 -*-
"""
Pydantic schemas for payments, transactions and reminder decisions.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class PaymentCreate(BaseModel):
    student_id: int
    total_amount: float = Field(..., gt=0)


class PaymentTransactionCreate(BaseModel):
    amount: float
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    payment_date: Optional[datetime] = None


class PaymentTransactionRead(BaseModel):
    id: int
    payment_id: int
    amount: float
    payment_date: datetime
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None

    class Config:
        from_attributes = True


class PaymentRead(BaseModel):
    id: int
    student_id: int
    total_amount: float
    paid_amount: float
    remaining_amount: float
    status: str
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    reminder_dismissed_at: Optional[datetime] = None
    reminder_dismissed_by: Optional[str] = None
    transactions: List[PaymentTransactionRead] = []

    class Config:
        from_attributes = True


class DismissReminderRequest(BaseModel):
    dismissed_by: Optional[str] = Field(None, max_length=100)


class ReminderDecisionRead(BaseModel):
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    payment_id: Optional[int] = None
    should_show_reminder: bool
    reason: str
    total_meetings: int = 0
    meetings_since_reset: int = 0
    last_reset_date: Optional[datetime] = None
    reset_type: Optional[str] = None
    remaining_amount: Optional[float] = None
