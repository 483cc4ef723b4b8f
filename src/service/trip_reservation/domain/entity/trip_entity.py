from datetime import date, datetime
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility
from src.service.trip_reservation.domain.value_object.segment_time import SegmentTime
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


# Longest run a trip may span, in days after its original date
MAX_DAY_OFFSET = 7


@attrs.define
class Segment:
    origin: str
    destination: str
    departure: SegmentTime
    arrival: SegmentTime
    capacity: int
    available_seats: int

    @property
    def seats_taken(self) -> int:
        return self.capacity - self.available_seats

    def is_consistent(self) -> bool:
        return 0 <= self.available_seats <= self.capacity


@attrs.define
class Trip:
    """
    A vehicle run on an original date, split into bookable legs.

    `stops` is the ordered list of physical stops (origin, intermediate stops,
    destination). Leg overlap for shared capacity is computed on this order.
    """

    original_date: date
    capacity: int
    stops: List[str]
    segments: List[Segment]
    visibility: TripVisibility = TripVisibility.PUBLISHED
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    record_id: Optional[int] = None  # None until persisted
    created_at: Optional[datetime] = None

    @staticmethod
    def validate_layout(*, capacity: int, stops: List[str], segments: List[Segment]) -> None:
        if capacity <= 0:
            raise DomainError('Trip capacity must be positive')
        if not segments:
            raise DomainError('Trip must have at least one segment')
        if segments[0].departure.day_offset != 0:
            raise DomainError('First segment must depart on the original date (no day offset)')

        for index, segment in enumerate(segments):
            if segment.origin not in stops or segment.destination not in stops:
                raise DomainError(f'Segment {index} references a stop outside the trip route')
            if stops.index(segment.origin) >= stops.index(segment.destination):
                raise DomainError(f'Segment {index} must travel forward along the route')
            if segment.arrival.day_offset > MAX_DAY_OFFSET:
                raise DomainError(
                    f'Segment {index} arrives more than {MAX_DAY_OFFSET} days '
                    'after the original date'
                )
            if segment.arrival.day_offset < segment.departure.day_offset:
                raise DomainError(f'Segment {index} arrives before it departs')
            if index and segment.departure.day_offset < segments[index - 1].departure.day_offset:
                raise DomainError('Segments must be ordered by departure')

    @classmethod
    def create(
        cls,
        *,
        original_date: date,
        capacity: int,
        stops: List[str],
        legs: List[tuple[str, str, SegmentTime, SegmentTime]],
        visibility: TripVisibility = TripVisibility.PUBLISHED,
        vehicle_id: Optional[int] = None,
        driver_id: Optional[int] = None,
    ) -> 'Trip':
        """Build a new trip; every leg starts with the full vehicle capacity available"""
        segments = [
            Segment(
                origin=origin,
                destination=destination,
                departure=departure,
                arrival=arrival,
                capacity=capacity,
                available_seats=capacity,
            )
            for origin, destination, departure, arrival in legs
        ]
        cls.validate_layout(capacity=capacity, stops=stops, segments=segments)
        return cls(
            original_date=original_date,
            capacity=capacity,
            stops=list(stops),
            segments=segments,
            visibility=visibility,
            vehicle_id=vehicle_id,
            driver_id=driver_id,
        )

    def segment(self, index: int) -> Segment:
        if not 0 <= index < len(self.segments):
            raise NotFoundError(f'Trip {self.record_id} has no segment {index}')
        return self.segments[index]

    def segment_ref(self, index: int) -> TripSegmentRef:
        if self.record_id is None:
            raise DomainError('Trip has not been persisted yet')
        self.segment(index)
        return TripSegmentRef(record_id=self.record_id, segment_index=index)

    def stop_span(self, index: int) -> tuple[int, int]:
        """Positions of a leg's origin and destination on the route"""
        segment = self.segment(index)
        return self.stops.index(segment.origin), self.stops.index(segment.destination)

    def with_available_seats(self, seats_by_index: dict[int, int]) -> 'Trip':
        segments = [
            attrs.evolve(segment, available_seats=seats_by_index[index])
            if index in seats_by_index
            else segment
            for index, segment in enumerate(self.segments)
        ]
        return attrs.evolve(self, segments=segments)

    @property
    def is_published(self) -> bool:
        return self.visibility == TripVisibility.PUBLISHED
