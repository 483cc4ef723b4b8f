from abc import ABC, abstractmethod
from datetime import date

from src.service.trip_reservation.domain.entity.trip_entity import Trip


class ITripQueryRepo(ABC):
    @abstractmethod
    async def list_published(self, *, departing_around: date | None = None) -> list[Trip]:
        """
        Published trips, oldest original date first.

        With `departing_around`, only trips whose original date lies within the
        maximum day offset before that day; legs still need to be filtered on
        their resolved dates.
        """
        pass
