from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.value_object.seat_availability import SeatAvailability
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


class CheckSeatAvailabilityUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork, seat_ledger_service: SeatLedgerService) -> None:
        self.uow = uow
        self.seat_ledger_service = seat_ledger_service

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        seat_ledger_service: SeatLedgerService = Depends(Provide[Container.seat_ledger_service]),
    ) -> Self:
        return cls(uow=uow, seat_ledger_service=seat_ledger_service)

    @Logger.io
    async def check(self, *, trip_id: str, seats: int) -> SeatAvailability:
        async with self.uow:
            return await self.seat_ledger_service.check_availability(
                uow=self.uow, trip_ref=TripSegmentRef.parse(trip_id), seats=seats
            )
