"""
Unit test fixtures: in-memory repositories behind a unit of work

Writes made inside a unit of work are staged and only become visible to other
units of work on commit; leaving the block without commit drops them. Every
repository call yields to the event loop once so concurrent use cases
interleave the way they would against a real database.
"""

import asyncio
import copy
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
import itertools
from typing import Any, Callable

import attrs
import pytest

from src.platform.config.core_setting import SeatSharingMode
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InvariantViolationError, NotFoundError
from src.platform.state.record_lock import RecordLockRegistry
from src.service.trip_reservation.app.interface.i_package_repo import IPackageRepo
from src.service.trip_reservation.app.interface.i_reservation_repo import IReservationRepo
from src.service.trip_reservation.app.interface.i_reservation_request_repo import (
    IReservationRequestRepo,
)
from src.service.trip_reservation.app.interface.i_transaction_repo import ITransactionRepo
from src.service.trip_reservation.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.trip_reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService
from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.entity.reservation_entity import Passenger, Reservation
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.entity.trip_entity import MAX_DAY_OFFSET, Trip
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo
from src.service.trip_reservation.domain.value_object.segment_time import SegmentTime


TABLES = ('trips', 'requests', 'reservations', 'passengers', 'transactions', 'packages')
_DELETED = object()  # staged deletion marker


class InMemoryStore:
    """Committed state shared by every unit of work of a test"""

    def __init__(self) -> None:
        self.tables: dict[str, dict[int, Any]] = {name: {} for name in TABLES}
        self._ids = itertools.count(1)
        self.commits = 0

    def next_id(self) -> int:
        return next(self._ids)

    # Direct accessors for assertions
    def trip(self, record_id: int) -> Trip:
        return copy.deepcopy(self.tables['trips'][record_id])

    def request(self, request_id: int) -> ReservationRequest:
        return copy.deepcopy(self.tables['requests'][request_id])

    def rows(self, table: str) -> list:
        return [copy.deepcopy(row) for row in self.tables[table].values()]


class _FakeRepo:
    def __init__(self, uow: 'FakeUnitOfWork') -> None:
        self.uow = uow


class FakeTripCommandRepo(_FakeRepo, ITripCommandRepo):
    async def create(self, *, trip: Trip) -> Trip:
        await asyncio.sleep(0)
        created = attrs.evolve(
            trip, record_id=self.uow.store.next_id(), created_at=datetime.now(timezone.utc)
        )
        self.uow.write('trips', created.record_id, created)
        return copy.deepcopy(created)

    async def get_by_id(self, *, record_id: int) -> Trip | None:
        await asyncio.sleep(0)
        return self.uow.read('trips', record_id)

    async def get_for_update(self, *, record_id: int) -> Trip | None:
        await asyncio.sleep(0)
        return self.uow.read('trips', record_id)

    async def update_available_seats(self, *, trip: Trip) -> None:
        await asyncio.sleep(0)
        if self.uow.read('trips', trip.record_id) is None:
            raise NotFoundError(f'Trip {trip.record_id} not found')
        for index, segment in enumerate(trip.segments):
            if not segment.is_consistent():
                raise InvariantViolationError(f'Segment {index} out of range')
        self.uow.write('trips', trip.record_id, trip)


class FakeTripQueryRepo(_FakeRepo, ITripQueryRepo):
    async def list_published(self, *, departing_around: date | None = None) -> list[Trip]:
        await asyncio.sleep(0)
        trips = [trip for trip in self.uow.read_all('trips') if trip.is_published]
        if departing_around is not None:
            earliest = departing_around - timedelta(days=MAX_DAY_OFFSET)
            trips = [trip for trip in trips if earliest <= trip.original_date <= departing_around]
        return sorted(trips, key=lambda trip: (trip.original_date, trip.record_id))


class FakeReservationRequestRepo(_FakeRepo, IReservationRequestRepo):
    async def create(self, *, request: ReservationRequest) -> ReservationRequest:
        await asyncio.sleep(0)
        created = attrs.evolve(request, id=self.uow.store.next_id())
        self.uow.write('requests', created.id, created)
        return copy.deepcopy(created)

    async def get_by_id(self, *, request_id: int) -> ReservationRequest | None:
        await asyncio.sleep(0)
        return self.uow.read('requests', request_id)

    async def get_for_update(self, *, request_id: int) -> ReservationRequest | None:
        await asyncio.sleep(0)
        return self.uow.read('requests', request_id)

    async def update(self, *, request: ReservationRequest) -> ReservationRequest:
        await asyncio.sleep(0)
        if self.uow.read('requests', request.id) is None:
            raise NotFoundError(f'Reservation request {request.id} not found')
        self.uow.write('requests', request.id, request)
        return copy.deepcopy(request)

    async def list_requests(self, *, status=None, requester_id=None) -> list[ReservationRequest]:
        await asyncio.sleep(0)
        requests = [
            request
            for request in self.uow.read_all('requests')
            if (status is None or request.status == status)
            and (requester_id is None or request.requester_id == requester_id)
        ]
        return sorted(requests, key=lambda request: request.id, reverse=True)


class FakeReservationRepo(_FakeRepo, IReservationRepo):
    async def create(self, *, reservation: Reservation) -> Reservation:
        await asyncio.sleep(0)
        created = attrs.evolve(reservation, id=self.uow.store.next_id(), passengers=[])
        self.uow.write('reservations', created.id, created)
        return copy.deepcopy(created)

    async def add_passengers(
        self, *, reservation_id: int, passengers: list[Passenger]
    ) -> list[Passenger]:
        await asyncio.sleep(0)
        created = []
        for passenger in passengers:
            row = attrs.evolve(
                passenger, reservation_id=reservation_id, id=self.uow.store.next_id()
            )
            self.uow.write('passengers', row.id, row)
            created.append(copy.deepcopy(row))
        return created

    def _with_passengers(self, reservation: Reservation | None) -> Reservation | None:
        if reservation is None:
            return None
        passengers = [
            passenger
            for passenger in self.uow.read_all('passengers')
            if passenger.reservation_id == reservation.id
        ]
        return attrs.evolve(reservation, passengers=sorted(passengers, key=lambda p: p.id))

    async def get_by_id(self, *, reservation_id: int) -> Reservation | None:
        await asyncio.sleep(0)
        return self._with_passengers(self.uow.read('reservations', reservation_id))

    async def get_for_update(self, *, reservation_id: int) -> Reservation | None:
        await asyncio.sleep(0)
        return self._with_passengers(self.uow.read('reservations', reservation_id))

    async def update_status(self, *, reservation: Reservation) -> Reservation:
        await asyncio.sleep(0)
        self.uow.write('reservations', reservation.id, attrs.evolve(reservation, passengers=[]))
        return reservation


class FakeTransactionRepo(_FakeRepo, ITransactionRepo):
    async def create(self, *, transaction: Transaction) -> Transaction:
        await asyncio.sleep(0)
        created = attrs.evolve(transaction, id=self.uow.store.next_id())
        self.uow.write('transactions', created.id, created)
        return copy.deepcopy(created)

    async def list_by_source(self, *, source, source_id: int) -> list[Transaction]:
        await asyncio.sleep(0)
        return [
            transaction
            for transaction in self.uow.read_all('transactions')
            if transaction.source == source and transaction.source_id == source_id
        ]

    async def delete(self, *, transaction_id: int) -> None:
        await asyncio.sleep(0)
        if self.uow.read('transactions', transaction_id) is None:
            raise NotFoundError(f'Transaction {transaction_id} not found')
        self.uow.delete('transactions', transaction_id)


class FakePackageRepo(_FakeRepo, IPackageRepo):
    async def create(self, *, package: Package) -> Package:
        await asyncio.sleep(0)
        created = attrs.evolve(package, id=self.uow.store.next_id())
        self.uow.write('packages', created.id, created)
        return copy.deepcopy(created)

    async def get_for_update(self, *, package_id: int) -> Package | None:
        await asyncio.sleep(0)
        return self.uow.read('packages', package_id)

    async def update(self, *, package: Package) -> Package:
        await asyncio.sleep(0)
        self.uow.write('packages', package.id, package)
        return copy.deepcopy(package)

    async def list_by_record_ids(self, *, record_ids: list[int]) -> list[Package]:
        await asyncio.sleep(0)
        return [
            package
            for package in self.uow.read_all('packages')
            if package.trip_ref.record_id in record_ids
        ]


class FakeUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.staged: dict[str, dict[int, Any]] = {name: {} for name in TABLES}
        self.trip_command_repo = FakeTripCommandRepo(self)
        self.trip_query_repo = FakeTripQueryRepo(self)
        self.reservation_request_repo = FakeReservationRequestRepo(self)
        self.reservation_repo = FakeReservationRepo(self)
        self.transaction_repo = FakeTransactionRepo(self)
        self.package_repo = FakePackageRepo(self)
        self.commits = 0
        self.rollbacks = 0

    def read(self, table: str, key: int | None) -> Any:
        if key in self.staged[table]:
            staged = self.staged[table][key]
            return None if staged is _DELETED else copy.deepcopy(staged)
        row = self.store.tables[table].get(key)
        return copy.deepcopy(row) if row is not None else None

    def read_all(self, table: str) -> list:
        merged = {**self.store.tables[table], **self.staged[table]}
        return [
            copy.deepcopy(row) for _, row in sorted(merged.items()) if row is not _DELETED
        ]

    def write(self, table: str, key: int, row: Any) -> None:
        self.staged[table][key] = copy.deepcopy(row)

    def delete(self, table: str, key: int) -> None:
        self.staged[table][key] = _DELETED

    async def _commit(self) -> None:
        for table, rows in self.staged.items():
            for key, row in rows.items():
                if row is _DELETED:
                    self.store.tables[table].pop(key, None)
                else:
                    self.store.tables[table][key] = row
            rows.clear()
        self.commits += 1
        self.store.commits += 1

    async def rollback(self) -> None:
        for rows in self.staged.values():
            rows.clear()
        self.rollbacks += 1


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow(store: InMemoryStore) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def uow_factory(store: InMemoryStore) -> Callable[[], FakeUnitOfWork]:
    """A fresh unit of work over the same store, one per concurrent caller"""
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def record_locks() -> RecordLockRegistry:
    return RecordLockRegistry(timeout_seconds=2.0)


@pytest.fixture
def seat_ledger_service(record_locks: RecordLockRegistry) -> SeatLedgerService:
    return SeatLedgerService(record_locks=record_locks, sharing_mode=SeatSharingMode.SEGMENT)


@pytest.fixture
def overlapping_seat_ledger_service(record_locks: RecordLockRegistry) -> SeatLedgerService:
    return SeatLedgerService(record_locks=record_locks, sharing_mode=SeatSharingMode.OVERLAPPING)


def build_trip(
    *,
    original_date: date = date(2025, 6, 13),
    capacity: int = 10,
    stops: list[str] | None = None,
    legs: list[tuple[str, str, str, str]] | None = None,
) -> Trip:
    """Default: an overnight A -> B -> C run, second leg departing after midnight"""
    stops = stops or ['Alpha City', 'Bravo Town', 'Charlie Port']
    legs = legs or [
        ('Alpha City', 'Bravo Town', '07:00 PM', '11:30 PM'),
        ('Bravo Town', 'Charlie Port', '03:00 AM +1d', '06:00 AM +1d'),
    ]
    return Trip.create(
        original_date=original_date,
        capacity=capacity,
        stops=stops,
        legs=[
            (origin, destination, SegmentTime.parse_strict(dep), SegmentTime.parse_strict(arr))
            for origin, destination, dep, arr in legs
        ],
    )


@pytest.fixture
def trip_builder() -> Callable[..., Trip]:
    """Unpersisted trips for pure domain tests"""
    return build_trip


@pytest.fixture
def trip_factory(store: InMemoryStore) -> Callable[..., Trip]:
    """Persist a trip straight into committed state"""

    def _create(**kwargs) -> Trip:
        trip = attrs.evolve(build_trip(**kwargs), record_id=store.next_id())
        store.tables['trips'][trip.record_id] = copy.deepcopy(trip)
        return trip

    return _create


@pytest.fixture
def request_factory(store: InMemoryStore) -> Callable[..., ReservationRequest]:
    """Persist a pending reservation request straight into committed state"""

    def _create(
        *,
        trip_id: str,
        passengers: int = 1,
        requester_id: int = 100,
        total_amount: Decimal = Decimal('50.00'),
        payment_method: PaymentMethod = PaymentMethod.CASH,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        advance_amount: Decimal = Decimal('0'),
        advance_payment_method: PaymentMethod | None = None,
    ) -> ReservationRequest:
        request = ReservationRequest.create(
            trip_id=trip_id,
            passengers=[
                PassengerInfo(first_name=f'Rider{n}', last_name='Doe') for n in range(passengers)
            ],
            total_amount=total_amount,
            payment_method=payment_method,
            payment_status=payment_status,
            requester_id=requester_id,
            advance_amount=advance_amount,
            advance_payment_method=advance_payment_method,
        )
        request = attrs.evolve(request, id=store.next_id())
        store.tables['requests'][request.id] = copy.deepcopy(request)
        return request

    return _create
