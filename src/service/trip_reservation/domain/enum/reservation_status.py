from enum import StrEnum


class ReservationRequestStatus(StrEnum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class ReservationStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELED = 'canceled'
    CANCELED_AND_REFUNDED = 'canceled_and_refunded'
