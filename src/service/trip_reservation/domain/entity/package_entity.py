from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import AlreadyResolvedError, DomainError
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.delivery_status import DeliveryStatus
from src.service.trip_reservation.domain.enum.payment import (
    PaymentMethod,
    TransactionKind,
    TransactionSource,
)
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


@attrs.define
class Package:
    """A parcel shipped on a trip leg. Packages never consume seats."""

    trip_id: str
    sender_name: str
    recipient_name: str
    price: Decimal
    created_by: int
    sender_phone: Optional[str] = None
    recipient_phone: Optional[str] = None
    description: Optional[str] = None
    is_paid: bool = False
    payment_method: Optional[PaymentMethod] = None
    paid_by: Optional[int] = None
    paid_at: Optional[datetime] = None
    delivery_status: DeliveryStatus = DeliveryStatus.IN_TRANSIT
    delivered_at: Optional[datetime] = None
    delivered_by: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        trip_id: str,
        sender_name: str,
        recipient_name: str,
        price: Decimal,
        created_by: int,
        sender_phone: Optional[str] = None,
        recipient_phone: Optional[str] = None,
        description: Optional[str] = None,
    ) -> 'Package':
        TripSegmentRef.parse(trip_id)
        if price < 0:
            raise DomainError('Package price must not be negative')
        return cls(
            trip_id=trip_id,
            sender_name=sender_name,
            recipient_name=recipient_name,
            price=price,
            created_by=created_by,
            sender_phone=sender_phone,
            recipient_phone=recipient_phone,
            description=description,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def trip_ref(self) -> TripSegmentRef:
        return TripSegmentRef.parse(self.trip_id)

    def mark_paid(self, *, actor_id: int, method: PaymentMethod) -> 'Package':
        if self.is_paid:
            raise AlreadyResolvedError(f'Package {self.id} is already paid')
        return attrs.evolve(
            self,
            is_paid=True,
            payment_method=method,
            paid_by=actor_id,
            paid_at=datetime.now(timezone.utc),
        )

    def payment_transaction(self) -> Transaction:
        if self.id is None or self.paid_by is None or self.payment_method is None:
            raise DomainError('Package payment has not been recorded')
        return Transaction.create(
            amount=self.price,
            method=self.payment_method,
            kind=TransactionKind.FULL_PAYMENT,
            source=TransactionSource.PACKAGE,
            source_id=self.id,
            user_id=self.paid_by,
        )

    def mark_delivered(self, *, actor_id: int) -> 'Package':
        if self.delivery_status == DeliveryStatus.DELIVERED:
            raise AlreadyResolvedError(f'Package {self.id} is already delivered')
        return attrs.evolve(
            self,
            delivery_status=DeliveryStatus.DELIVERED,
            delivered_at=datetime.now(timezone.utc),
            delivered_by=actor_id,
        )
