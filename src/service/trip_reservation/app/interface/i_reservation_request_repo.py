from abc import ABC, abstractmethod

from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.enum.reservation_status import ReservationRequestStatus


class IReservationRequestRepo(ABC):
    @abstractmethod
    async def create(self, *, request: ReservationRequest) -> ReservationRequest:
        pass

    @abstractmethod
    async def get_by_id(self, *, request_id: int) -> ReservationRequest | None:
        pass

    @abstractmethod
    async def get_for_update(self, *, request_id: int) -> ReservationRequest | None:
        """Load a request with its row locked until the surrounding unit of work ends"""
        pass

    @abstractmethod
    async def update(self, *, request: ReservationRequest) -> ReservationRequest:
        pass

    @abstractmethod
    async def list_requests(
        self,
        *,
        status: ReservationRequestStatus | None = None,
        requester_id: int | None = None,
    ) -> list[ReservationRequest]:
        """Newest first"""
        pass
