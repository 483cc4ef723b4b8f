"""
Manual seat adjustments on one trip leg (e.g. seats sold at the door, or
returned by a no-show), outside the reservation workflow.
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


class ReserveSeatsUseCase:
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
    async def reserve(self, *, trip_id: str, seats: int) -> Trip:
        trip_ref = TripSegmentRef.parse(trip_id)
        async with self.uow:
            async with self.seat_ledger_service.lock(trip_ref):
                trip = await self.seat_ledger_service.reserve_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=seats
                )
                await self.uow.commit()
        return trip


class ReleaseSeatsUseCase:
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
    async def release(self, *, trip_id: str, seats: int) -> Trip:
        trip_ref = TripSegmentRef.parse(trip_id)
        async with self.uow:
            async with self.seat_ledger_service.lock(trip_ref):
                trip = await self.seat_ledger_service.release_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=seats
                )
                await self.uow.commit()
        return trip
