"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.trip_reservation.driven_adapter.model.package_model import PackageModel
from src.service.trip_reservation.driven_adapter.model.reservation_model import (
    PassengerModel,
    ReservationModel,
)
from src.service.trip_reservation.driven_adapter.model.reservation_request_model import (
    ReservationRequestModel,
)
from src.service.trip_reservation.driven_adapter.model.transaction_model import TransactionModel
from src.service.trip_reservation.driven_adapter.model.trip_model import (
    TripModel,
    TripSegmentModel,
)


__all__ = [
    'PackageModel',
    'PassengerModel',
    'ReservationModel',
    'ReservationRequestModel',
    'TransactionModel',
    'TripModel',
    'TripSegmentModel',
]
