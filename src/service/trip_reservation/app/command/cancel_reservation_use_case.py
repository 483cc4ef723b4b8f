from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.reservation_entity import Reservation
from src.service.trip_reservation.domain.enum.payment import TransactionSource


class CancelReservationUseCase:
    """
    Confirmed -> canceled (or canceled and refunded), giving the seats back.

    Release is clamped at leg capacity, so cancelling never inflates
    availability even if counts were adjusted by hand in between. A plain
    cancel keeps the money already collected on record and only switches
    unpaid reservations to payment status "cancelled". A refund removes the
    reservation's transactions in the same unit of work as the release.
    """

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

    async def _get_reservation(self, *, reservation_id: int, for_update: bool) -> Reservation:
        repo = self.uow.reservation_repo
        reservation = await (
            repo.get_for_update(reservation_id=reservation_id)
            if for_update
            else repo.get_by_id(reservation_id=reservation_id)
        )
        if reservation is None:
            raise NotFoundError(f'Reservation {reservation_id} not found')
        return reservation

    @Logger.io
    async def cancel(self, *, reservation_id: int, actor_id: int) -> Reservation:
        async with self.uow:
            reservation = await self._get_reservation(
                reservation_id=reservation_id, for_update=False
            )
            trip_ref = reservation.trip_ref

            async with self.seat_ledger_service.lock(trip_ref):
                reservation = await self._get_reservation(
                    reservation_id=reservation_id, for_update=True
                )

                canceled = reservation.cancel()
                await self.seat_ledger_service.release_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=reservation.seat_count
                )
                canceled = await self.uow.reservation_repo.update_status(reservation=canceled)
                await self.uow.commit()

        Logger.base.info(
            f'↩️ [RESERVATION] Reservation {reservation_id} canceled by {actor_id}'
        )
        return canceled

    @Logger.io
    async def cancel_and_refund(self, *, reservation_id: int, actor_id: int) -> Reservation:
        async with self.uow:
            reservation = await self._get_reservation(
                reservation_id=reservation_id, for_update=False
            )
            trip_ref = reservation.trip_ref

            async with self.seat_ledger_service.lock(trip_ref):
                reservation = await self._get_reservation(
                    reservation_id=reservation_id, for_update=True
                )

                refunded = reservation.cancel_and_refund()
                transactions = await self.uow.transaction_repo.list_by_source(
                    source=TransactionSource.RESERVATION, source_id=reservation_id
                )
                if not transactions:
                    raise DomainError(
                        f'Reservation {reservation_id} has no collected payment to refund'
                    )

                await self.seat_ledger_service.release_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=reservation.seat_count
                )
                for transaction in transactions:
                    await self.uow.transaction_repo.delete(transaction_id=transaction.id)
                refunded = await self.uow.reservation_repo.update_status(reservation=refunded)
                await self.uow.commit()

        refund_total = sum(transaction.amount for transaction in transactions)
        Logger.base.info(
            f'💸 [RESERVATION] Reservation {reservation_id} canceled by {actor_id}, '
            f'refunded {refund_total} over {len(transactions)} transaction(s)'
        )
        return refunded
