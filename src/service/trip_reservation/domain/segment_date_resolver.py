"""
Segment Date Resolver

A trip is stored once with its original date, yet later legs of an overnight
run depart on the following calendar day(s). Each leg's departure/arrival label
carries a "+Nd" day offset; the leg's real date is original_date + N days.
"""

from datetime import date, datetime
from typing import Optional, Union

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.value_object.segment_time import SegmentTime


@attrs.frozen
class SegmentSchedule:
    departure_date: date
    arrival_date: date
    departure_at: Optional[datetime]  # None when the label has no clock time
    arrival_at: Optional[datetime]


def resolve_segment_date(original_date: date, time_label: Union[str, SegmentTime, None]) -> date:
    """
    Calendar date on which a time label falls.

        resolve_segment_date(date(2025, 6, 13), '07:00 PM')     -> 2025-06-13
        resolve_segment_date(date(2025, 6, 13), '03:00 AM +1d') -> 2025-06-14

    Malformed or missing labels, and offsets past the calendar's end, resolve to
    the original date.
    """
    segment_time = (
        time_label if isinstance(time_label, SegmentTime) else SegmentTime.parse(time_label)
    )
    try:
        return segment_time.on(original_date)
    except OverflowError:
        Logger.base.warning(
            f'⚠️ [SEGMENT_TIME] Day offset {segment_time.day_offset} from {original_date} '
            f'is out of range, assuming day offset 0'
        )
        return original_date


def _combine(day: date, segment_time: SegmentTime) -> Optional[datetime]:
    if segment_time.clock is None:
        return None
    return datetime.combine(day, segment_time.clock)


def resolve_segment_schedule(trip: Trip, segment_index: int) -> SegmentSchedule:
    segment = trip.segment(segment_index)
    departure_date = resolve_segment_date(trip.original_date, segment.departure)
    arrival_date = resolve_segment_date(trip.original_date, segment.arrival)
    return SegmentSchedule(
        departure_date=departure_date,
        arrival_date=arrival_date,
        departure_at=_combine(departure_date, segment.departure),
        arrival_at=_combine(arrival_date, segment.arrival),
    )


def segment_departs_on(trip: Trip, segment_index: int, day: date) -> bool:
    return resolve_segment_date(trip.original_date, trip.segment(segment_index).departure) == day
