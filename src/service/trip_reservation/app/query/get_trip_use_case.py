from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.trip_entity import Trip


class GetTripUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_trip(self, *, record_id: int) -> Trip:
        async with self.uow:
            trip = await self.uow.trip_command_repo.get_by_id(record_id=record_id)
        if trip is None:
            raise NotFoundError(f'Trip {record_id} not found')
        return trip
