"""
Payment vocabulary shared by reservation requests, reservations, packages and
the transactions they produce.
"""

from enum import StrEnum


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PAID = 'paid'
    CANCELLED = 'cancelled'


class PaymentMethod(StrEnum):
    CASH = 'cash'
    TRANSFER = 'transfer'


class TransactionKind(StrEnum):
    FULL_PAYMENT = 'full_payment'
    ADVANCE = 'advance'


class TransactionSource(StrEnum):
    RESERVATION = 'reservation'
    PACKAGE = 'package'
