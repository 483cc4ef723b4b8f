from abc import ABC, abstractmethod

from src.service.trip_reservation.domain.entity.reservation_entity import Passenger, Reservation


class IReservationRepo(ABC):
    @abstractmethod
    async def create(self, *, reservation: Reservation) -> Reservation:
        """Persist the reservation row; passengers are added separately"""
        pass

    @abstractmethod
    async def add_passengers(
        self, *, reservation_id: int, passengers: list[Passenger]
    ) -> list[Passenger]:
        pass

    @abstractmethod
    async def get_by_id(self, *, reservation_id: int) -> Reservation | None:
        """Reservation with its passengers"""
        pass

    @abstractmethod
    async def get_for_update(self, *, reservation_id: int) -> Reservation | None:
        pass

    @abstractmethod
    async def update_status(self, *, reservation: Reservation) -> Reservation:
        pass
