from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.trip_reservation.app.dto.trip_segment_view import TripSegmentView
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility
from src.service.trip_reservation.domain.value_object.seat_availability import SeatAvailability


class TripSegmentCreateRequest(BaseModel):
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    departure_time: str  # e.g. "07:00 PM" or "03:00 AM +1d"
    arrival_time: str


class TripCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'original_date': '2025-06-13',
                'capacity': 40,
                'stops': ['Mexico City', 'Queretaro', 'Monterrey'],
                'segments': [
                    {
                        'origin': 'Mexico City',
                        'destination': 'Queretaro',
                        'departure_time': '07:00 PM',
                        'arrival_time': '10:00 PM',
                    },
                    {
                        'origin': 'Queretaro',
                        'destination': 'Monterrey',
                        'departure_time': '10:30 PM',
                        'arrival_time': '06:00 AM +1d',
                    },
                ],
            }
        }
    )

    original_date: date
    capacity: int = Field(gt=0)
    stops: List[str] = Field(min_length=2)
    segments: List[TripSegmentCreateRequest] = Field(min_length=1)
    visibility: TripVisibility = TripVisibility.PUBLISHED
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None


class TripSegmentResponse(BaseModel):
    trip_id: str
    record_id: int
    segment_index: int
    origin: str
    destination: str
    departure_time: str
    arrival_time: str
    departure_date: date
    arrival_date: date
    departure_at: Optional[datetime] = None
    arrival_at: Optional[datetime] = None
    capacity: int
    available_seats: int

    @classmethod
    def from_view(cls, view: TripSegmentView) -> 'TripSegmentResponse':
        return cls(
            trip_id=view.trip_id,
            record_id=view.record_id,
            segment_index=view.segment_index,
            origin=view.origin,
            destination=view.destination,
            departure_time=view.departure_time,
            arrival_time=view.arrival_time,
            departure_date=view.departure_date,
            arrival_date=view.arrival_date,
            departure_at=view.departure_at,
            arrival_at=view.arrival_at,
            capacity=view.capacity,
            available_seats=view.available_seats,
        )


class TripResponse(BaseModel):
    record_id: int
    original_date: date
    capacity: int
    stops: List[str]
    visibility: str
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    segments: List[TripSegmentResponse]

    @classmethod
    def from_entity(cls, trip: Trip) -> 'TripResponse':
        return cls(
            record_id=trip.record_id or 0,
            original_date=trip.original_date,
            capacity=trip.capacity,
            stops=trip.stops,
            visibility=trip.visibility.value,
            vehicle_id=trip.vehicle_id,
            driver_id=trip.driver_id,
            segments=[
                TripSegmentResponse.from_view(TripSegmentView.from_trip(trip, index))
                for index in range(len(trip.segments))
            ],
        )


class SeatCountRequest(BaseModel):
    seats: int = Field(gt=0)


class SeatAvailabilityResponse(BaseModel):
    trip_id: str
    ok: bool
    available: int
    requested: int

    @classmethod
    def from_value(cls, trip_id: str, availability: SeatAvailability) -> 'SeatAvailabilityResponse':
        return cls(
            trip_id=trip_id,
            ok=availability.ok,
            available=availability.available,
            requested=availability.requested,
        )
