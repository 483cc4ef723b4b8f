"""
Seat Ledger - capacity arithmetic for trip legs

Pure domain logic, no persistence and no locking. Given a trip, a target leg
and a seat count, it decides which legs share the seats and computes the new
per-leg availability. Callers are responsible for serializing mutations of the
same trip record.

Sharing modes:
- SEGMENT: a reservation consumes seats on the targeted leg only.
- OVERLAPPING: a reservation consumes seats on every leg of the same record
  whose stop interval intersects the targeted leg's interval, so a passenger
  riding A->C also occupies the seat on A->B and B->C.
"""

from typing import List

from src.platform.config.core_setting import SeatSharingMode
from src.platform.exception.exceptions import (
    InsufficientCapacityError,
    InvalidSeatCountError,
    InvariantViolationError,
)
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.value_object.seat_availability import SeatAvailability


def validate_seat_count(seats: int) -> int:
    # bool is an int subclass; True must not count as one seat
    if isinstance(seats, bool) or not isinstance(seats, int) or seats <= 0:
        raise InvalidSeatCountError(f'Seat count must be a positive integer, got {seats!r}')
    return seats


class SeatLedger:
    def __init__(self, *, mode: SeatSharingMode = SeatSharingMode.SEGMENT) -> None:
        self.mode = mode

    def affected_segment_indexes(self, trip: Trip, segment_index: int) -> List[int]:
        trip.segment(segment_index)
        if self.mode == SeatSharingMode.SEGMENT:
            return [segment_index]

        origin, destination = trip.stop_span(segment_index)
        affected = []
        for index in range(len(trip.segments)):
            other_origin, other_destination = trip.stop_span(index)
            if other_origin < destination and other_destination > origin:
                affected.append(index)
        return affected

    def _ensure_consistent(self, trip: Trip, indexes: List[int]) -> None:
        for index in indexes:
            segment = trip.segments[index]
            if not segment.is_consistent():
                raise InvariantViolationError(
                    f'Trip {trip.record_id} segment {index} has {segment.available_seats} '
                    f'available seats outside [0, {segment.capacity}]'
                )

    def check_availability(self, trip: Trip, segment_index: int, seats: int) -> SeatAvailability:
        validate_seat_count(seats)
        indexes = self.affected_segment_indexes(trip, segment_index)
        available = min(trip.segments[index].available_seats for index in indexes)
        return SeatAvailability(ok=available >= seats, available=max(available, 0), requested=seats)

    def reserve(self, trip: Trip, segment_index: int, seats: int) -> Trip:
        """
        Take `seats` from every affected leg, all or nothing.

        Raises:
            InvalidSeatCountError: seats is not a positive integer
            InvariantViolationError: a stored count is already out of range
            InsufficientCapacityError: some affected leg has fewer than `seats` left
        """
        validate_seat_count(seats)
        indexes = self.affected_segment_indexes(trip, segment_index)
        self._ensure_consistent(trip, indexes)

        available = min(trip.segments[index].available_seats for index in indexes)
        if available < seats:
            raise InsufficientCapacityError(
                f'Only {available} seat(s) left on trip {trip.record_id}_{segment_index}, '
                f'{seats} requested',
                available=available,
            )

        return trip.with_available_seats(
            {index: trip.segments[index].available_seats - seats for index in indexes}
        )

    def release(self, trip: Trip, segment_index: int, seats: int) -> Trip:
        """Give `seats` back to every affected leg, never exceeding leg capacity"""
        validate_seat_count(seats)
        indexes = self.affected_segment_indexes(trip, segment_index)
        return trip.with_available_seats(
            {
                index: min(
                    max(trip.segments[index].available_seats, 0) + seats,
                    trip.segments[index].capacity,
                )
                for index in indexes
            }
        )
