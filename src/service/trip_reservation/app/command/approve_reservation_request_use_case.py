import time
from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import (
    AlreadyResolvedError,
    CustomBaseError,
    InsufficientCapacityError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.reservation_entity import Reservation
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)


class ApproveReservationRequestUseCase:
    """
    Turn a pending reservation request into a confirmed reservation.

    Flow (one unit of work, trip record locked from step 2 on):
    1. Load the request; it must exist and still be pending
    2. Resolve its trip leg and check seat availability
    3. Reserve the seats on every affected leg
    4. Create the reservation, owned by the requester
    5. Create one passenger per seat
    6. Record a transaction if money was collected (full payment or advance)
    7. Mark the request approved and commit

    Any failure after step 1 rolls everything back; the request stays pending
    with the failure reason recorded in a separate short transaction.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, seat_ledger_service: SeatLedgerService) -> None:
        self.uow = uow
        self.seat_ledger_service = seat_ledger_service
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        seat_ledger_service: SeatLedgerService = Depends(Provide[Container.seat_ledger_service]),
    ) -> Self:
        return cls(uow=uow, seat_ledger_service=seat_ledger_service)

    @Logger.io
    async def approve(self, *, request_id: int, approver_id: int) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.approve_reservation_request',
            attributes={'request_id': request_id, 'approver_id': approver_id},
        ) as span:
            started = time.perf_counter()
            try:
                reservation = await self._approve(request_id=request_id, approver_id=approver_id)
            except (NotFoundError, AlreadyResolvedError) as e:
                metrics.record_resolution(action='approve', result=e.error_code)
                raise
            except CustomBaseError as e:
                await self._record_failure(request_id=request_id, reason=e.message)
                metrics.record_resolution(
                    action='approve',
                    result=e.error_code,
                    duration=time.perf_counter() - started,
                )
                raise
            except Exception as e:
                await self._record_failure(request_id=request_id, reason=f'Unexpected error: {e}')
                metrics.record_resolution(action='approve', result='unexpected_error')
                raise

            metrics.record_resolution(
                action='approve', result='success', duration=time.perf_counter() - started
            )
            span.set_attribute('reservation_id', reservation.id or 0)
            Logger.base.info(
                f'✅ [APPROVE] Request {request_id} -> reservation {reservation.id} '
                f'({reservation.seat_count} seat(s) on {reservation.trip_id})'
            )
            return reservation

    async def _get_pending_request(
        self, *, request_id: int, for_update: bool
    ) -> ReservationRequest:
        repo = self.uow.reservation_request_repo
        if for_update:
            request = await repo.get_for_update(request_id=request_id)
        else:
            request = await repo.get_by_id(request_id=request_id)
        if request is None:
            raise NotFoundError(f'Reservation request {request_id} not found')
        request.ensure_pending()
        return request

    async def _approve(self, *, request_id: int, approver_id: int) -> Reservation:
        async with self.uow:
            # 1. Fail fast before queueing on the record lock
            request = await self._get_pending_request(request_id=request_id, for_update=False)
            trip_ref = request.trip_ref

            async with self.seat_ledger_service.lock(trip_ref):
                # Re-read under lock: a concurrent approver may have resolved it meanwhile
                request = await self._get_pending_request(request_id=request_id, for_update=True)

                # 2. Availability
                availability = await self.seat_ledger_service.check_availability(
                    uow=self.uow, trip_ref=trip_ref, seats=request.seat_count
                )
                if not availability.ok:
                    raise InsufficientCapacityError(
                        f'Only {availability.available} seat(s) left on trip {trip_ref}, '
                        f'{request.seat_count} requested',
                        available=availability.available,
                    )

                # 3. Seats
                await self.seat_ledger_service.reserve_seats(
                    uow=self.uow, trip_ref=trip_ref, seats=request.seat_count
                )

                # 4. Reservation
                draft = Reservation.from_request(request)
                reservation = await self.uow.reservation_repo.create(reservation=draft)
                assert reservation.id is not None

                # 5. Passengers
                passengers = await self.uow.reservation_repo.add_passengers(
                    reservation_id=reservation.id, passengers=draft.passengers
                )

                # 6. Transaction, only when money moved
                transaction = reservation.collected_payment(collected_by=approver_id)
                if transaction is not None:
                    transaction = await self.uow.transaction_repo.create(transaction=transaction)

                # 7. Resolve the request
                await self.uow.reservation_request_repo.update(
                    request=request.approve(approver_id=approver_id)
                )
                await self.uow.commit()

        return attrs.evolve(reservation, passengers=passengers, transaction=transaction)

    async def _record_failure(self, *, request_id: int, reason: str) -> None:
        """Store why the last approval attempt failed; the request itself stays pending"""
        try:
            async with self.uow:
                request = await self.uow.reservation_request_repo.get_for_update(
                    request_id=request_id
                )
                if request is None or not request.is_pending:
                    return
                await self.uow.reservation_request_repo.update(
                    request=request.record_failure(reason=reason)
                )
                await self.uow.commit()
        except Exception as e:
            # The approval error is what the caller needs to see
            Logger.base.warning(
                f'⚠️ [APPROVE] Could not record failure reason on request {request_id}: {e}'
            )
