"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.trip_reservation.app.command import (
    approve_reservation_request_use_case,
    cancel_reservation_use_case,
    create_reservation_request_use_case,
    create_reservation_use_case,
    update_seats_use_case,
)
from src.service.trip_reservation.app.query import check_seat_availability_use_case


WIRE_MODULES: list[ModuleType] = [
    approve_reservation_request_use_case,
    cancel_reservation_use_case,
    create_reservation_request_use_case,
    create_reservation_use_case,
    update_seats_use_case,
    check_seat_availability_use_case,
]
