"""
Seat Ledger Service

Applies the SeatLedger arithmetic to persisted trips.

Mutations of one trip record are serialized twice:
1. in-process: RecordLockRegistry keyed by record_id (bounded wait)
2. in the database: segment rows are read with SELECT ... FOR UPDATE

so a second reservation against the same record always re-checks availability
against the value left by the first. Different records never wait on each other.

reserve_seats/release_seats run inside the caller's unit of work and never
commit; the caller decides the transaction boundary.
"""

from contextlib import AbstractAsyncContextManager

from opentelemetry import trace

from src.platform.config.core_setting import SeatSharingMode
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.platform.state.record_lock import RecordLockRegistry
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.seat_ledger import SeatLedger
from src.service.trip_reservation.domain.value_object.seat_availability import SeatAvailability
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


class SeatLedgerService:
    def __init__(
        self,
        *,
        record_locks: RecordLockRegistry,
        sharing_mode: SeatSharingMode = SeatSharingMode.SEGMENT,
    ) -> None:
        self.record_locks = record_locks
        self.seat_ledger = SeatLedger(mode=sharing_mode)
        self.tracer = trace.get_tracer(__name__)

    def lock(self, trip_ref: TripSegmentRef) -> AbstractAsyncContextManager[None]:
        """Serialize ledger mutations of one trip record within this process"""
        return self.record_locks.hold(trip_ref.record_id)

    @staticmethod
    async def _load(uow: AbstractUnitOfWork, trip_ref: TripSegmentRef, *, for_update: bool) -> Trip:
        if for_update:
            trip = await uow.trip_command_repo.get_for_update(record_id=trip_ref.record_id)
        else:
            trip = await uow.trip_command_repo.get_by_id(record_id=trip_ref.record_id)
        if trip is None:
            raise NotFoundError(f'Trip {trip_ref.record_id} not found')
        trip.segment(trip_ref.segment_index)
        return trip

    @Logger.io
    async def check_availability(
        self, *, uow: AbstractUnitOfWork, trip_ref: TripSegmentRef, seats: int
    ) -> SeatAvailability:
        """Read-only; availability is the minimum over the legs that share the seats"""
        trip = await self._load(uow, trip_ref, for_update=False)
        availability = self.seat_ledger.check_availability(trip, trip_ref.segment_index, seats)
        metrics.record_ledger_operation(
            operation='check', result='available' if availability.ok else 'insufficient'
        )
        return availability

    @Logger.io
    async def reserve_seats(
        self, *, uow: AbstractUnitOfWork, trip_ref: TripSegmentRef, seats: int
    ) -> Trip:
        with self.tracer.start_as_current_span(
            'seat_ledger.reserve',
            attributes={'trip_id': trip_ref.trip_id, 'seats': seats},
        ):
            try:
                trip = await self._load(uow, trip_ref, for_update=True)
                updated = self.seat_ledger.reserve(trip, trip_ref.segment_index, seats)
                await uow.trip_command_repo.update_available_seats(trip=updated)
            except CustomBaseError as e:
                metrics.record_ledger_operation(operation='reserve', result=e.error_code)
                raise

            metrics.record_ledger_operation(operation='reserve', result='success', seats=seats)
            metrics.update_segment_availability(
                trip_id=trip_ref.trip_id,
                available=updated.segments[trip_ref.segment_index].available_seats,
            )
            return updated

    @Logger.io
    async def release_seats(
        self, *, uow: AbstractUnitOfWork, trip_ref: TripSegmentRef, seats: int
    ) -> Trip:
        with self.tracer.start_as_current_span(
            'seat_ledger.release',
            attributes={'trip_id': trip_ref.trip_id, 'seats': seats},
        ):
            try:
                trip = await self._load(uow, trip_ref, for_update=True)
                updated = self.seat_ledger.release(trip, trip_ref.segment_index, seats)
                await uow.trip_command_repo.update_available_seats(trip=updated)
            except CustomBaseError as e:
                metrics.record_ledger_operation(operation='release', result=e.error_code)
                raise

            metrics.record_ledger_operation(operation='release', result='success', seats=seats)
            metrics.update_segment_availability(
                trip_id=trip_ref.trip_id,
                available=updated.segments[trip_ref.segment_index].available_seats,
            )
            return updated
