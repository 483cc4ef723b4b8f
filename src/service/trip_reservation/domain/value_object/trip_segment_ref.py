import attrs

from src.platform.exception.exceptions import DomainError


@attrs.frozen
class TripSegmentRef:
    """
    Address of one leg of a trip.

    Externally a leg is named by the token "{record_id}_{segment_index}"
    (e.g. "42_1" is the second leg of trip record 42).
    """

    record_id: int
    segment_index: int

    @classmethod
    def parse(cls, trip_id: str) -> 'TripSegmentRef':
        record_part, sep, index_part = str(trip_id).rpartition('_')
        if not sep or not record_part.isdigit() or not index_part.isdigit():
            raise DomainError(
                f'Invalid trip id: {trip_id!r}, expected "<record_id>_<segment_index>"'
            )
        return cls(record_id=int(record_part), segment_index=int(index_part))

    @property
    def trip_id(self) -> str:
        return f'{self.record_id}_{self.segment_index}'

    def __str__(self) -> str:
        return self.trip_id
