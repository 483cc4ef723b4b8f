from typing import List, Optional, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.enum.reservation_status import ReservationRequestStatus


class ListReservationRequestsUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_requests(
        self,
        *,
        status: Optional[ReservationRequestStatus] = None,
        requester_id: Optional[int] = None,
    ) -> List[ReservationRequest]:
        async with self.uow:
            return await self.uow.reservation_request_repo.list_requests(
                status=status, requester_id=requester_id
            )
