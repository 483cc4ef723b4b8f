from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.service.trip_reservation.domain.enum.payment import (
    PaymentMethod,
    TransactionKind,
    TransactionSource,
)


@attrs.define
class Transaction:
    """Money collected by a user (approver, driver, clerk) for a reservation or package"""

    amount: Decimal
    method: PaymentMethod
    kind: TransactionKind
    source: TransactionSource
    source_id: int
    user_id: int  # Who collected the money
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        amount: Decimal,
        method: PaymentMethod,
        kind: TransactionKind,
        source: TransactionSource,
        source_id: int,
        user_id: int,
    ) -> 'Transaction':
        return cls(
            amount=amount,
            method=method,
            kind=kind,
            source=source,
            source_id=source_id,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
