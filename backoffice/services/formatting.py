# -*- coding: utf-8 -*-
"""
Currency and label helpers shared by the commission and reminder services.

Amounts are Indonesian Rupiah: "." groups thousands, "," separates decimals,
and decimals are only shown when present (Rp 15.000, Rp 1.500,5).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from backoffice.enums import CommissionType
from backoffice.errors import InvalidAmount

CURRENCY_SYMBOL = "Rp"

COMMISSION_TYPE_LABELS = {
    CommissionType.BY_CLASS: "Commission per Class",
    CommissionType.BY_STUDENT: "Commission per Student",
}


def _to_decimal(amount):
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(f"Amount must be a number, got: {amount!r}", field="amount")
    try:
        return Decimal(str(amount))
    except InvalidOperation:
        raise InvalidAmount(f"Amount must be a number, got: {amount!r}", field="amount")


def format_number(amount):
    value = _to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer, _, fraction = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(integer):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    if fraction:
        return f"{sign}{grouped},{fraction}"
    return f"{sign}{grouped}"


def format_currency(amount):
    """
    Formats an amount for display, e.g. ``format_currency(100000) == "Rp 100.000"``.
    """
    text = format_number(amount)
    if text.startswith("-"):
        return f"-{CURRENCY_SYMBOL} {text[1:]}"
    return f"{CURRENCY_SYMBOL} {text}"


def commission_type_label(commission_type):
    try:
        return COMMISSION_TYPE_LABELS[CommissionType(commission_type)]
    except (ValueError, KeyError):
        return "Unknown"


def format_date(value):
    return value.strftime("%Y-%m-%d")
