from abc import ABC, abstractmethod

from src.service.trip_reservation.domain.entity.trip_entity import Trip


class ITripCommandRepo(ABC):
    """
    Trip writes and locked reads.

    Per-leg seat counters are rows keyed by (record_id, segment_index); they are
    the only state the seat ledger mutates.
    """

    @abstractmethod
    async def create(self, *, trip: Trip) -> Trip:
        pass

    @abstractmethod
    async def get_by_id(self, *, record_id: int) -> Trip | None:
        pass

    @abstractmethod
    async def get_for_update(self, *, record_id: int) -> Trip | None:
        """
        Load a trip with its segment rows locked until the surrounding unit of
        work ends (SELECT ... FOR UPDATE)
        """
        pass

    @abstractmethod
    async def update_available_seats(self, *, trip: Trip) -> None:
        pass
