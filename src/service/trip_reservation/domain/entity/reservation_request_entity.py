from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import (
    AlreadyResolvedError,
    DomainError,
    InvalidSeatCountError,
)
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.enum.reservation_status import ReservationRequestStatus
from src.service.trip_reservation.domain.seat_ledger import validate_seat_count
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


def validate_payment_terms(
    *,
    total_amount: Decimal,
    payment_status: PaymentStatus,
    advance_amount: Decimal,
    advance_payment_method: Optional[PaymentMethod],
) -> None:
    """Money rules shared by requests and direct reservations"""
    if payment_status == PaymentStatus.CANCELLED:
        raise DomainError('A new reservation cannot start with payment status cancelled')
    if total_amount < 0 or advance_amount < 0:
        raise DomainError('Amounts must not be negative')
    if advance_amount > total_amount:
        raise DomainError('Advance amount cannot exceed the total amount')
    if advance_amount > 0 and advance_payment_method is None:
        raise DomainError('Advance payment method is required when an advance is paid')


@attrs.define
class ReservationRequest:
    """
    A requester's ask for seats on one trip leg, waiting for an approver.

    Lifecycle: PENDING -> APPROVED | REJECTED, exactly once. A failed approval
    attempt leaves the request PENDING with `last_failure_reason` set.
    """

    trip_id: str
    seat_count: int
    passengers: List[PassengerInfo]
    total_amount: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    requester_id: int
    advance_amount: Decimal = Decimal('0')
    advance_payment_method: Optional[PaymentMethod] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    status: ReservationRequestStatus = ReservationRequestStatus.PENDING
    reviewed_by: Optional[int] = None
    review_notes: Optional[str] = None
    last_failure_reason: Optional[str] = None
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
        requester_id: int,
        seat_count: Optional[int] = None,
        advance_amount: Decimal = Decimal('0'),
        advance_payment_method: Optional[PaymentMethod] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> 'ReservationRequest':
        TripSegmentRef.parse(trip_id)
        seat_count = validate_seat_count(len(passengers) if seat_count is None else seat_count)
        if len(passengers) != seat_count:
            raise InvalidSeatCountError(
                f'Seat count {seat_count} does not match {len(passengers)} passenger(s)'
            )
        validate_payment_terms(
            total_amount=total_amount,
            payment_status=payment_status,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
        )

        now = datetime.now(timezone.utc)
        return cls(
            trip_id=trip_id,
            seat_count=seat_count,
            passengers=list(passengers),
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status=payment_status,
            requester_id=requester_id,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
            phone=phone,
            email=email,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    @property
    def trip_ref(self) -> TripSegmentRef:
        return TripSegmentRef.parse(self.trip_id)

    @property
    def is_pending(self) -> bool:
        return self.status == ReservationRequestStatus.PENDING

    def ensure_pending(self) -> None:
        if not self.is_pending:
            raise AlreadyResolvedError(
                f'Reservation request {self.id} is already {self.status.value}'
            )

    def approve(self, *, approver_id: int) -> 'ReservationRequest':
        self.ensure_pending()
        return attrs.evolve(
            self,
            status=ReservationRequestStatus.APPROVED,
            reviewed_by=approver_id,
            last_failure_reason=None,
            updated_at=datetime.now(timezone.utc),
        )

    def reject(self, *, approver_id: int, reason: Optional[str] = None) -> 'ReservationRequest':
        self.ensure_pending()
        return attrs.evolve(
            self,
            status=ReservationRequestStatus.REJECTED,
            reviewed_by=approver_id,
            review_notes=reason,
            updated_at=datetime.now(timezone.utc),
        )

    def record_failure(self, *, reason: str) -> 'ReservationRequest':
        return attrs.evolve(
            self, last_failure_reason=reason, updated_at=datetime.now(timezone.utc)
        )
