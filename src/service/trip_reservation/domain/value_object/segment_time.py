"""
Segment Time - wall-clock time plus day offset

Time labels arrive as text ("07:00 PM", "03:00 AM +1d", "19:00", "05:15 +2d").
The "+Nd" suffix says how many calendar days after the trip's original date the
event happens. Labels are parsed once, here; everything downstream works on
SegmentTime.
"""

from datetime import date, datetime, time, timedelta
import re
from typing import Optional

import attrs

from src.platform.exception.exceptions import MalformedTimeLabelError
from src.platform.logging.loguru_io import Logger


_LABEL_PATTERN = re.compile(r'(?P<clock>.*?)\s*(?:\+\s*(?P<days>\d+)\s*[dD])?')
_CLOCK_FORMATS = ('%I:%M %p', '%I:%M%p', '%H:%M', '%H:%M:%S')


def _parse_clock(text: str) -> Optional[time]:
    if not text:
        return None
    normalized = ' '.join(text.upper().split())
    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(normalized, fmt).time()
        except ValueError:
            continue
    raise MalformedTimeLabelError(f'Unrecognized clock time: {text!r}')


def _non_negative(instance: 'SegmentTime', attribute: attrs.Attribute, value: int) -> None:
    if value < 0:
        raise ValueError(f'{attribute.name} must be >= 0, got {value}')


@attrs.frozen
class SegmentTime:
    clock: Optional[time] = None
    day_offset: int = attrs.field(default=0, validator=_non_negative)

    @classmethod
    def parse_strict(cls, label: Optional[str]) -> 'SegmentTime':
        """Parse a time label, raising MalformedTimeLabelError on anything unexpected"""
        if label is None or not str(label).strip():
            raise MalformedTimeLabelError('Missing time label')

        match = _LABEL_PATTERN.fullmatch(str(label).strip())
        if match is None:
            raise MalformedTimeLabelError(f'Unrecognized time label: {label!r}')

        days = int(match.group('days') or 0)
        if days > timedelta.max.days:
            raise MalformedTimeLabelError(f'Day offset out of range: {label!r}')
        return cls(clock=_parse_clock(match.group('clock')), day_offset=days)

    @classmethod
    def parse(cls, label: Optional[str]) -> 'SegmentTime':
        """
        Lenient parse used at the boundary.

        A malformed or missing label never fails the caller: it is logged and
        treated as same-day with no known clock time.
        """
        try:
            return cls.parse_strict(label)
        except MalformedTimeLabelError as e:
            Logger.base.warning(f'⚠️ [SEGMENT_TIME] {e}, assuming day offset 0')
            return cls()

    def on(self, original_date: date) -> date:
        return original_date + timedelta(days=self.day_offset)

    def format(self) -> str:
        clock = self.clock.strftime('%I:%M %p') if self.clock is not None else ''
        suffix = f'+{self.day_offset}d' if self.day_offset else ''
        return ' '.join(part for part in (clock, suffix) if part)

    def __str__(self) -> str:
        return self.format()
