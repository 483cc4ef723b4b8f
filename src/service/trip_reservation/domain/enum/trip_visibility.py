from enum import StrEnum


class TripVisibility(StrEnum):
    """Only published trips are offered by segment search"""

    PUBLISHED = 'published'
    HIDDEN = 'hidden'
    CANCELLED = 'cancelled'
