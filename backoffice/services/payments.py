# -*- coding: utf-8 -*-
"""
Payment balance bookkeeping for new transactions.
"""
from collections import namedtuple
import math
from decimal import Decimal
from numbers import Real

from backoffice.enums import PaymentStatus
from backoffice.errors import InvalidAmount

PaymentTotals = namedtuple("PaymentTotals", ["paid_amount", "remaining_amount", "status"])


def _check_amount(value, field):
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        raise InvalidAmount(f"{field} must be a number, got: {value!r}", field=field)
    if not math.isfinite(value):
        raise InvalidAmount(f"{field} must be a finite number, got: {value}", field=field)
    return value


def payment_status_for(paid_amount, remaining_amount):
    if remaining_amount <= 0:
        return PaymentStatus.COMPLETED
    if paid_amount > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def apply_transaction(total_amount, paid_amount, amount):
    """
    Returns the payment totals after registering ``amount``.

    The remaining balance may reach zero but never go below it: a transaction
    larger than the outstanding amount is rejected.
    """
    total_amount = _check_amount(total_amount, "total_amount")
    paid_amount = _check_amount(paid_amount, "paid_amount")
    amount = _check_amount(amount, "amount")
    if amount <= 0:
        raise InvalidAmount(f"Transaction amount must be positive, got: {amount}", field="amount")

    remaining_before = total_amount - paid_amount
    if amount > remaining_before:
        raise InvalidAmount(
            f"Transaction amount {amount} exceeds the remaining balance {remaining_before}",
            field="amount",
        )

    new_paid = paid_amount + amount
    new_remaining = total_amount - new_paid
    return PaymentTotals(new_paid, new_remaining, payment_status_for(new_paid, new_remaining))
