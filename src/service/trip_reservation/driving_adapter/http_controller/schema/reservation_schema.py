from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.trip_reservation.domain.entity.reservation_entity import Reservation
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo


class PassengerSchema(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = ''

    def to_value(self) -> PassengerInfo:
        return PassengerInfo(first_name=self.first_name, last_name=self.last_name)


class ReservationPayload(BaseModel):
    trip_id: str
    passengers: List[PassengerSchema] = Field(min_length=1)
    total_amount: Decimal = Field(ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING
    advance_amount: Decimal = Field(default=Decimal('0'), ge=0)
    advance_payment_method: Optional[PaymentMethod] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None


class ReservationRequestCreateRequest(ReservationPayload):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'trip_id': '42_1',
                'seat_count': 2,
                'passengers': [
                    {'first_name': 'Ana', 'last_name': 'Lopez'},
                    {'first_name': 'Luis', 'last_name': 'Lopez'},
                ],
                'total_amount': '900.00',
                'payment_method': 'cash',
                'payment_status': 'pending',
                'advance_amount': '200.00',
                'advance_payment_method': 'transfer',
                'phone': '+52 55 1234 5678',
            }
        }
    )

    seat_count: Optional[int] = None  # Defaults to the number of passengers


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class ReservationRequestResponse(BaseModel):
    id: int
    trip_id: str
    seat_count: int
    passengers: List[PassengerSchema]
    total_amount: Decimal
    payment_method: str
    payment_status: str
    advance_amount: Decimal
    advance_payment_method: Optional[str] = None
    requester_id: int
    status: str
    reviewed_by: Optional[int] = None
    review_notes: Optional[str] = None
    last_failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, request: ReservationRequest) -> 'ReservationRequestResponse':
        return cls(
            id=request.id or 0,
            trip_id=request.trip_id,
            seat_count=request.seat_count,
            passengers=[
                PassengerSchema(first_name=p.first_name, last_name=p.last_name)
                for p in request.passengers
            ],
            total_amount=request.total_amount,
            payment_method=request.payment_method.value,
            payment_status=request.payment_status.value,
            advance_amount=request.advance_amount,
            advance_payment_method=(
                request.advance_payment_method.value if request.advance_payment_method else None
            ),
            requester_id=request.requester_id,
            status=request.status.value,
            reviewed_by=request.reviewed_by,
            review_notes=request.review_notes,
            last_failure_reason=request.last_failure_reason,
            created_at=request.created_at,
        )


class PassengerResponse(BaseModel):
    id: Optional[int] = None
    first_name: str
    last_name: str


class TransactionResponse(BaseModel):
    id: Optional[int] = None
    amount: Decimal
    method: str
    kind: str
    source: str
    source_id: int
    user_id: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, transaction: Transaction) -> 'TransactionResponse':
        return cls(
            id=transaction.id,
            amount=transaction.amount,
            method=transaction.method.value,
            kind=transaction.kind.value,
            source=transaction.source.value,
            source_id=transaction.source_id,
            user_id=transaction.user_id,
            created_at=transaction.created_at,
        )


class ReservationResponse(BaseModel):
    id: int
    trip_id: str
    seat_count: int
    status: str
    payment_status: str
    payment_method: str
    total_amount: Decimal
    advance_amount: Decimal
    advance_payment_method: Optional[str] = None
    created_by: int
    source_request_id: Optional[int] = None
    passengers: List[PassengerResponse]
    transaction: Optional[TransactionResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> 'ReservationResponse':
        return cls(
            id=reservation.id or 0,
            trip_id=reservation.trip_id,
            seat_count=reservation.seat_count,
            status=reservation.status.value,
            payment_status=reservation.payment_status.value,
            payment_method=reservation.payment_method.value,
            total_amount=reservation.total_amount,
            advance_amount=reservation.advance_amount,
            advance_payment_method=(
                reservation.advance_payment_method.value
                if reservation.advance_payment_method
                else None
            ),
            created_by=reservation.created_by,
            source_request_id=reservation.source_request_id,
            passengers=[
                PassengerResponse(id=p.id, first_name=p.first_name, last_name=p.last_name)
                for p in reservation.passengers
            ],
            transaction=(
                TransactionResponse.from_entity(reservation.transaction)
                if reservation.transaction
                else None
            ),
            created_at=reservation.created_at,
        )
