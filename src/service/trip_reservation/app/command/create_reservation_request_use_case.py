from decimal import Decimal
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import InsufficientCapacityError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo


class CreateReservationRequestUseCase:
    """
    Store a pending reservation request.

    Availability is checked only to fail fast; nothing is reserved until an
    approver accepts the request.
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

    @Logger.io
    async def create_request(
        self,
        *,
        requester_id: int,
        trip_id: str,
        passengers: List[PassengerInfo],
        total_amount: Decimal,
        payment_method: PaymentMethod,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        seat_count: Optional[int] = None,
        advance_amount: Decimal = Decimal('0'),
        advance_payment_method: Optional[PaymentMethod] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ReservationRequest:
        request = ReservationRequest.create(
            trip_id=trip_id,
            passengers=passengers,
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status=payment_status,
            requester_id=requester_id,
            seat_count=seat_count,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
            phone=phone,
            email=email,
            notes=notes,
        )

        async with self.uow:
            availability = await self.seat_ledger_service.check_availability(
                uow=self.uow, trip_ref=request.trip_ref, seats=request.seat_count
            )
            if not availability.ok:
                raise InsufficientCapacityError(
                    f'Only {availability.available} seat(s) left on trip {trip_id}, '
                    f'{request.seat_count} requested',
                    available=availability.available,
                )

            created = await self.uow.reservation_request_repo.create(request=request)
            await self.uow.commit()

        Logger.base.info(
            f'📝 [REQUEST] Request {created.id} by {requester_id} for '
            f'{created.seat_count} seat(s) on {trip_id}'
        )
        return created
