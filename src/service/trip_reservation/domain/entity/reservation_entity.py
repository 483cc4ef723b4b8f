from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import AlreadyResolvedError, InvalidSeatCountError
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.payment import (
    PaymentMethod,
    PaymentStatus,
    TransactionKind,
    TransactionSource,
)
from src.service.trip_reservation.domain.enum.reservation_status import ReservationStatus
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


@attrs.define
class Passenger:
    first_name: str
    last_name: str
    reservation_id: Optional[int] = None
    id: Optional[int] = None


@attrs.define
class Reservation:
    trip_id: str
    seat_count: int
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_by: int
    advance_amount: Decimal = Decimal('0')
    advance_payment_method: Optional[PaymentMethod] = None
    status: ReservationStatus = ReservationStatus.CONFIRMED
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    source_request_id: Optional[int] = None  # Set when created by approving a request
    passengers: List[Passenger] = attrs.field(factory=list)
    transaction: Optional[Transaction] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        trip_id: str,
        passengers: List[PassengerInfo],
        total_amount: Decimal,
        payment_method: PaymentMethod,
        payment_status: PaymentStatus,
        created_by: int,
        advance_amount: Decimal = Decimal('0'),
        advance_payment_method: Optional[PaymentMethod] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
        source_request_id: Optional[int] = None,
    ) -> 'Reservation':
        now = datetime.now(timezone.utc)
        return cls(
            trip_id=trip_id,
            seat_count=len(passengers),
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status=payment_status,
            created_by=created_by,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
            phone=phone,
            email=email,
            notes=notes,
            source_request_id=source_request_id,
            passengers=[
                Passenger(first_name=p.first_name, last_name=p.last_name) for p in passengers
            ],
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_request(cls, request: ReservationRequest) -> 'Reservation':
        """Reservation materialized on approval; it belongs to the requester, not the approver"""
        if len(request.passengers) != request.seat_count:
            raise InvalidSeatCountError(
                f'Request {request.id} lists {len(request.passengers)} passenger(s) '
                f'for {request.seat_count} seat(s)'
            )
        return cls.create(
            trip_id=request.trip_id,
            passengers=request.passengers,
            total_amount=request.total_amount,
            payment_method=request.payment_method,
            payment_status=request.payment_status,
            created_by=request.requester_id,
            advance_amount=request.advance_amount,
            advance_payment_method=request.advance_payment_method,
            phone=request.phone,
            email=request.email,
            notes=request.notes,
            source_request_id=request.id,
        )

    @property
    def trip_ref(self) -> TripSegmentRef:
        return TripSegmentRef.parse(self.trip_id)

    def collected_payment(self, *, collected_by: int) -> Optional[Transaction]:
        """
        The transaction to record when this reservation is created, if money moved.

        Fully paid -> the total with the payment method.
        Otherwise an advance > 0 -> the advance with the advance method.
        Otherwise nothing was collected.
        """
        if self.id is None:
            raise ValueError('Reservation must be persisted before recording its payment')

        if self.payment_status == PaymentStatus.PAID:
            amount = self.total_amount
            method = self.payment_method
            kind = TransactionKind.FULL_PAYMENT
        elif self.advance_amount > 0:
            amount = self.advance_amount
            method = self.advance_payment_method or self.payment_method
            kind = TransactionKind.ADVANCE
        else:
            return None

        return Transaction.create(
            amount=amount,
            method=method,
            kind=kind,
            source=TransactionSource.RESERVATION,
            source_id=self.id,
            user_id=collected_by,
        )

    def _ensure_confirmed(self) -> None:
        if self.status != ReservationStatus.CONFIRMED:
            raise AlreadyResolvedError(f'Reservation {self.id} is already {self.status}')

    def cancel(self) -> 'Reservation':
        self._ensure_confirmed()
        payment_status = (
            self.payment_status
            if self.payment_status == PaymentStatus.PAID
            else PaymentStatus.CANCELLED
        )
        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELED,
            payment_status=payment_status,
            updated_at=datetime.now(timezone.utc),
        )

    def cancel_and_refund(self) -> 'Reservation':
        """Canceled with the collected money handed back; nothing remains paid"""
        self._ensure_confirmed()
        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELED_AND_REFUNDED,
            payment_status=PaymentStatus.CANCELLED,
            updated_at=datetime.now(timezone.utc),
        )
