from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.enum.payment import PaymentMethod
from src.service.trip_reservation.driving_adapter.http_controller.schema.reservation_schema import (
    TransactionResponse,
)


class PackageCreateRequest(BaseModel):
    trip_id: str
    sender_name: str = Field(min_length=1)
    sender_phone: Optional[str] = None
    recipient_name: str = Field(min_length=1)
    recipient_phone: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(ge=0)


class PackagePaymentRequest(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CASH


class PackageResponse(BaseModel):
    id: int
    trip_id: str
    sender_name: str
    sender_phone: Optional[str] = None
    recipient_name: str
    recipient_phone: Optional[str] = None
    description: Optional[str] = None
    price: Decimal
    is_paid: bool
    payment_method: Optional[str] = None
    paid_by: Optional[int] = None
    delivery_status: str
    delivered_at: Optional[datetime] = None
    delivered_by: Optional[int] = None
    created_by: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, package: Package) -> 'PackageResponse':
        return cls(
            id=package.id or 0,
            trip_id=package.trip_id,
            sender_name=package.sender_name,
            sender_phone=package.sender_phone,
            recipient_name=package.recipient_name,
            recipient_phone=package.recipient_phone,
            description=package.description,
            price=package.price,
            is_paid=package.is_paid,
            payment_method=package.payment_method.value if package.payment_method else None,
            paid_by=package.paid_by,
            delivery_status=package.delivery_status.value,
            delivered_at=package.delivered_at,
            delivered_by=package.delivered_by,
            created_by=package.created_by,
            created_at=package.created_at,
        )


class PackagePaymentResponse(BaseModel):
    package: PackageResponse
    transaction: TransactionResponse
