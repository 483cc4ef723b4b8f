from typing import Self

import attrs
from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.reservation_entity import Reservation
from src.service.trip_reservation.domain.enum.payment import TransactionSource


class GetReservationUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def get_reservation(self, *, reservation_id: int) -> Reservation:
        """Reservation with its passengers and the transaction recorded at creation, if any"""
        async with self.uow:
            reservation = await self.uow.reservation_repo.get_by_id(reservation_id=reservation_id)
            if reservation is None:
                raise NotFoundError(f'Reservation {reservation_id} not found')
            transactions = await self.uow.transaction_repo.list_by_source(
                source=TransactionSource.RESERVATION, source_id=reservation_id
            )

        return attrs.evolve(reservation, transaction=transactions[0] if transactions else None)
