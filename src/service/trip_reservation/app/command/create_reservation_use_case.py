from decimal import Decimal
from typing import List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import InsufficientCapacityError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.reservation_entity import Reservation
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    validate_payment_terms,
)
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.seat_ledger import validate_seat_count
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


class CreateReservationUseCase:
    """
    Direct reservation by a privileged actor (ticket desk, driver), no approval step.

    Same sequence as an approval: seats, reservation, passengers and the
    conditional transaction commit together. The actor both owns the
    reservation and collected any money.
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
    async def create_reservation(
        self,
        *,
        actor_id: int,
        trip_id: str,
        passengers: List[PassengerInfo],
        total_amount: Decimal,
        payment_method: PaymentMethod,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        advance_amount: Decimal = Decimal('0'),
        advance_payment_method: Optional[PaymentMethod] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Reservation:
        trip_ref = TripSegmentRef.parse(trip_id)
        seats = validate_seat_count(len(passengers))
        validate_payment_terms(
            total_amount=total_amount,
            payment_status=payment_status,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
        )

        draft = Reservation.create(
            trip_id=trip_id,
            passengers=passengers,
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status=payment_status,
            created_by=actor_id,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
            phone=phone,
            email=email,
            notes=notes,
        )

        async with self.uow:
            async with self.seat_ledger_service.lock(trip_ref):
                availability = await self.seat_ledger_service.check_availability(
                    uow=self.uow, trip_ref=trip_ref, seats=seats
                )
                if not availability.ok:
                    raise InsufficientCapacityError(
                        f'Only {availability.available} seat(s) left on trip {trip_id}, '
                        f'{seats} requested',
                        available=availability.available,
                    )
                await self.seat_ledger_service.reserve_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=seats
                )

                reservation = await self.uow.reservation_repo.create(reservation=draft)
                assert reservation.id is not None
                created_passengers = await self.uow.reservation_repo.add_passengers(
                    reservation_id=reservation.id, passengers=draft.passengers
                )

                transaction = reservation.collected_payment(collected_by=actor_id)
                if transaction is not None:
                    transaction = await self.uow.transaction_repo.create(transaction=transaction)

                await self.uow.commit()

        Logger.base.info(
            f'🎫 [RESERVATION] Reservation {reservation.id} by {actor_id}: '
            f'{seats} seat(s) on {trip_id}'
        )
        return attrs.evolve(reservation, passengers=created_passengers, transaction=transaction)
