from datetime import date, datetime
from typing import Optional

import attrs

from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.segment_date_resolver import resolve_segment_schedule


@attrs.define
class TripSegmentView:
    """One bookable leg as offered to callers, with its resolved dates"""

    trip_id: str
    record_id: int
    segment_index: int
    origin: str
    destination: str
    departure_time: str
    arrival_time: str
    departure_date: date
    arrival_date: date
    departure_at: Optional[datetime]
    arrival_at: Optional[datetime]
    capacity: int
    available_seats: int

    @classmethod
    def from_trip(cls, trip: Trip, segment_index: int) -> 'TripSegmentView':
        segment = trip.segment(segment_index)
        schedule = resolve_segment_schedule(trip, segment_index)
        return cls(
            trip_id=trip.segment_ref(segment_index).trip_id,
            record_id=trip.record_id or 0,
            segment_index=segment_index,
            origin=segment.origin,
            destination=segment.destination,
            departure_time=segment.departure.format(),
            arrival_time=segment.arrival.format(),
            departure_date=schedule.departure_date,
            arrival_date=schedule.arrival_date,
            departure_at=schedule.departure_at,
            arrival_at=schedule.arrival_at,
            capacity=segment.capacity,
            available_seats=segment.available_seats,
        )
