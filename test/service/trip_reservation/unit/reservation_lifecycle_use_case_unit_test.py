"""
Unit tests for the reservation lifecycle outside approval:
request creation, rejection, direct reservations, lookups, cancellation and refunds
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import (
    AlreadyResolvedError,
    DomainError,
    InsufficientCapacityError,
    InvalidSeatCountError,
    NotFoundError,
)
from src.service.trip_reservation.app.command.approve_reservation_request_use_case import (
    ApproveReservationRequestUseCase,
)
from src.service.trip_reservation.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.trip_reservation.app.command.create_reservation_request_use_case import (
    CreateReservationRequestUseCase,
)
from src.service.trip_reservation.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from src.service.trip_reservation.app.command.reject_reservation_request_use_case import (
    RejectReservationRequestUseCase,
)
from src.service.trip_reservation.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.trip_reservation.app.query.list_reservation_requests_use_case import (
    ListReservationRequestsUseCase,
)
from src.service.trip_reservation.domain.enum.payment import (
    PaymentMethod,
    PaymentStatus,
    TransactionKind,
)
from src.service.trip_reservation.domain.enum.reservation_status import (
    ReservationRequestStatus,
    ReservationStatus,
)
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo


PASSENGERS = [PassengerInfo('Ana', 'Silva'), PassengerInfo('Ben', 'Okafor')]


@pytest.mark.unit
class TestCreateReservationRequest:
    @pytest.mark.asyncio
    async def test_create_request_is_pending_and_reserves_nothing(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=4)
        use_case = CreateReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        request = await use_case.create_request(
            requester_id=55,
            trip_id=f'{trip.record_id}_1',
            passengers=PASSENGERS,
            total_amount=Decimal('70.00'),
            payment_method=PaymentMethod.CASH,
        )

        # Assert
        assert request.id is not None
        assert request.status == ReservationRequestStatus.PENDING
        assert request.seat_count == 2
        assert store.request(request.id).requester_id == 55
        assert store.trip(trip.record_id).segments[1].available_seats == 4

    @pytest.mark.asyncio
    async def test_create_request_fails_fast_without_seats(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        trip = trip_factory(capacity=1)
        use_case = CreateReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(InsufficientCapacityError):
            await use_case.create_request(
                requester_id=55,
                trip_id=f'{trip.record_id}_0',
                passengers=PASSENGERS,
                total_amount=Decimal('70.00'),
                payment_method=PaymentMethod.CASH,
            )
        assert store.rows('requests') == []

    @pytest.mark.asyncio
    async def test_seat_count_mismatch_is_rejected(
        self, uow, seat_ledger_service, trip_factory
    ) -> None:
        trip = trip_factory()
        use_case = CreateReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(InvalidSeatCountError):
            await use_case.create_request(
                requester_id=55,
                trip_id=f'{trip.record_id}_0',
                passengers=PASSENGERS,
                seat_count=1,
                total_amount=Decimal('70.00'),
                payment_method=PaymentMethod.CASH,
            )

    @pytest.mark.asyncio
    async def test_unknown_trip_is_not_found(self, uow, seat_ledger_service) -> None:
        use_case = CreateReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(NotFoundError):
            await use_case.create_request(
                requester_id=55,
                trip_id='999_0',
                passengers=PASSENGERS,
                total_amount=Decimal('70.00'),
                payment_method=PaymentMethod.CASH,
            )

    @pytest.mark.asyncio
    async def test_malformed_trip_id_is_domain_error(self, uow, seat_ledger_service) -> None:
        use_case = CreateReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(DomainError):
            await use_case.create_request(
                requester_id=55,
                trip_id='not-a-trip',
                passengers=PASSENGERS,
                total_amount=Decimal('70.00'),
                payment_method=PaymentMethod.CASH,
            )


@pytest.mark.unit
class TestRejectReservationRequest:
    @pytest.mark.asyncio
    async def test_reject_records_reviewer_and_reason(
        self, uow, store, trip_factory, request_factory
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=3)
        request = request_factory(trip_id=f'{trip.record_id}_0')

        # Act
        rejected = await RejectReservationRequestUseCase(uow=uow).reject(
            request_id=request.id, approver_id=900, reason='Vehicle change'
        )

        # Assert
        assert rejected.status == ReservationRequestStatus.REJECTED
        assert rejected.reviewed_by == 900
        assert rejected.review_notes == 'Vehicle change'
        assert store.request(request.id).status == ReservationRequestStatus.REJECTED
        assert store.trip(trip.record_id).segments[0].available_seats == 3

    @pytest.mark.asyncio
    async def test_rejected_request_cannot_be_approved(
        self, uow, seat_ledger_service, store, trip_factory, request_factory
    ) -> None:
        # Arrange
        trip = trip_factory()
        request = request_factory(trip_id=f'{trip.record_id}_0')
        await RejectReservationRequestUseCase(uow=uow).reject(
            request_id=request.id, approver_id=900
        )
        approve = ApproveReservationRequestUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act / Assert
        with pytest.raises(AlreadyResolvedError):
            await approve.approve(request_id=request.id, approver_id=900)
        assert store.rows('reservations') == []

    @pytest.mark.asyncio
    async def test_reject_missing_request_is_not_found(self, uow) -> None:
        with pytest.raises(NotFoundError):
            await RejectReservationRequestUseCase(uow=uow).reject(request_id=404, approver_id=900)


@pytest.mark.unit
class TestListReservationRequests:
    @pytest.mark.asyncio
    async def test_filters_by_status_and_requester(
        self, uow, trip_factory, request_factory
    ) -> None:
        # Arrange
        trip = trip_factory()
        mine = request_factory(trip_id=f'{trip.record_id}_0', requester_id=1)
        request_factory(trip_id=f'{trip.record_id}_0', requester_id=2)
        rejected = request_factory(trip_id=f'{trip.record_id}_0', requester_id=1)
        await RejectReservationRequestUseCase(uow=uow).reject(request_id=rejected.id, approver_id=9)
        use_case = ListReservationRequestsUseCase(uow=uow)

        # Act
        pending_mine = await use_case.list_requests(
            status=ReservationRequestStatus.PENDING, requester_id=1
        )
        everything = await use_case.list_requests()

        # Assert
        assert [r.id for r in pending_mine] == [mine.id]
        assert len(everything) == 3


@pytest.mark.unit
class TestDirectReservation:
    @pytest.mark.asyncio
    async def test_direct_reservation_reserves_and_records_payment(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=6)
        use_case = CreateReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        reservation = await use_case.create_reservation(
            actor_id=31,
            trip_id=f'{trip.record_id}_0',
            passengers=PASSENGERS,
            total_amount=Decimal('90.00'),
            payment_method=PaymentMethod.TRANSFER,
            payment_status=PaymentStatus.PAID,
        )

        # Assert
        assert reservation.created_by == 31
        assert reservation.source_request_id is None
        assert len(reservation.passengers) == 2
        assert reservation.transaction is not None
        assert reservation.transaction.kind == TransactionKind.FULL_PAYMENT
        assert reservation.transaction.user_id == 31
        assert store.trip(trip.record_id).segments[0].available_seats == 4

    @pytest.mark.asyncio
    async def test_direct_reservation_without_seats_changes_nothing(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        trip = trip_factory(capacity=1)
        use_case = CreateReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(InsufficientCapacityError):
            await use_case.create_reservation(
                actor_id=31,
                trip_id=f'{trip.record_id}_0',
                passengers=PASSENGERS,
                total_amount=Decimal('90.00'),
                payment_method=PaymentMethod.CASH,
            )
        assert store.trip(trip.record_id).segments[0].available_seats == 1
        assert store.rows('reservations') == []

    @pytest.mark.asyncio
    async def test_direct_reservation_needs_passengers(
        self, uow, seat_ledger_service, trip_factory
    ) -> None:
        trip = trip_factory()
        use_case = CreateReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(InvalidSeatCountError):
            await use_case.create_reservation(
                actor_id=31,
                trip_id=f'{trip.record_id}_0',
                passengers=[],
                total_amount=Decimal('0'),
                payment_method=PaymentMethod.CASH,
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'payment_status,advance_amount,advance_payment_method',
        [
            (PaymentStatus.PENDING, Decimal('20.00'), None),
            (PaymentStatus.CANCELLED, Decimal('0'), None),
            (PaymentStatus.PENDING, Decimal('120.00'), PaymentMethod.CASH),
        ],
    )
    async def test_direct_reservation_applies_request_payment_rules(
        self,
        uow,
        seat_ledger_service,
        store,
        trip_factory,
        payment_status,
        advance_amount,
        advance_payment_method,
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=4)
        use_case = CreateReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        with pytest.raises(DomainError):
            await use_case.create_reservation(
                actor_id=31,
                trip_id=f'{trip.record_id}_0',
                passengers=PASSENGERS,
                total_amount=Decimal('90.00'),
                payment_method=PaymentMethod.CASH,
                payment_status=payment_status,
                advance_amount=advance_amount,
                advance_payment_method=advance_payment_method,
            )

        # Assert
        assert store.trip(trip.record_id).segments[0].available_seats == 4
        assert store.rows('reservations') == []


@pytest.mark.unit
class TestGetAndCancelReservation:
    @pytest.mark.asyncio
    async def test_get_reservation_includes_passengers_and_transaction(
        self, uow, seat_ledger_service, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory()
        created = await CreateReservationUseCase(
            uow=uow, seat_ledger_service=seat_ledger_service
        ).create_reservation(
            actor_id=31,
            trip_id=f'{trip.record_id}_1',
            passengers=PASSENGERS,
            total_amount=Decimal('90.00'),
            payment_method=PaymentMethod.CASH,
            advance_amount=Decimal('30.00'),
            advance_payment_method=PaymentMethod.CASH,
        )

        # Act
        reservation = await GetReservationUseCase(uow=uow).get_reservation(
            reservation_id=created.id
        )

        # Assert
        assert [p.last_name for p in reservation.passengers] == ['Silva', 'Okafor']
        assert reservation.transaction is not None
        assert reservation.transaction.kind == TransactionKind.ADVANCE
        assert reservation.transaction.amount == Decimal('30.00')

    @pytest.mark.asyncio
    async def test_get_missing_reservation_is_not_found(self, uow) -> None:
        with pytest.raises(NotFoundError):
            await GetReservationUseCase(uow=uow).get_reservation(reservation_id=321)

    @pytest.mark.asyncio
    async def test_cancel_gives_seats_back_once(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=5)
        created = await CreateReservationUseCase(
            uow=uow, seat_ledger_service=seat_ledger_service
        ).create_reservation(
            actor_id=31,
            trip_id=f'{trip.record_id}_0',
            passengers=PASSENGERS,
            total_amount=Decimal('90.00'),
            payment_method=PaymentMethod.CASH,
        )
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        canceled = await cancel.cancel(reservation_id=created.id, actor_id=31)

        # Assert
        assert canceled.status == ReservationStatus.CANCELED
        assert canceled.payment_status == PaymentStatus.CANCELLED
        assert store.trip(trip.record_id).segments[0].available_seats == 5
        with pytest.raises(AlreadyResolvedError):
            await cancel.cancel(reservation_id=created.id, actor_id=31)
        assert store.trip(trip.record_id).segments[0].available_seats == 5

    @pytest.mark.asyncio
    async def test_cancel_missing_reservation_is_not_found(self, uow, seat_ledger_service) -> None:
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(NotFoundError):
            await cancel.cancel(reservation_id=77, actor_id=31)


@pytest.mark.unit
class TestCancelAndRefundReservation:
    @pytest.fixture
    def paid_reservation(self, uow, seat_ledger_service, trip_factory):
        async def _create(*, payment_status=PaymentStatus.PAID, advance_amount=Decimal('0')):
            trip = trip_factory(capacity=5)
            reservation = await CreateReservationUseCase(
                uow=uow, seat_ledger_service=seat_ledger_service
            ).create_reservation(
                actor_id=31,
                trip_id=f'{trip.record_id}_0',
                passengers=PASSENGERS,
                total_amount=Decimal('90.00'),
                payment_method=PaymentMethod.TRANSFER,
                payment_status=payment_status,
                advance_amount=advance_amount,
                advance_payment_method=PaymentMethod.CASH if advance_amount else None,
            )
            return trip, reservation

        return _create

    @pytest.mark.asyncio
    async def test_refund_releases_seats_and_removes_transaction(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        # Arrange
        trip, created = await paid_reservation()
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        refunded = await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        # Assert
        assert refunded.status == ReservationStatus.CANCELED_AND_REFUNDED
        assert refunded.payment_status == PaymentStatus.CANCELLED
        assert store.trip(trip.record_id).segments[0].available_seats == 5
        assert store.rows('transactions') == []
        stored = await GetReservationUseCase(uow=uow).get_reservation(reservation_id=created.id)
        assert stored.status == ReservationStatus.CANCELED_AND_REFUNDED
        assert stored.transaction is None

    @pytest.mark.asyncio
    async def test_advance_is_refunded_too(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        trip, created = await paid_reservation(
            payment_status=PaymentStatus.PENDING, advance_amount=Decimal('30.00')
        )
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        assert store.rows('transactions') == []
        assert store.trip(trip.record_id).segments[0].available_seats == 5

    @pytest.mark.asyncio
    async def test_refund_twice_is_already_resolved(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        # Arrange
        trip, created = await paid_reservation()
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)
        await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        # Act
        with pytest.raises(AlreadyResolvedError):
            await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        # Assert
        assert store.trip(trip.record_id).segments[0].available_seats == 5

    @pytest.mark.asyncio
    async def test_canceled_reservation_cannot_be_refunded(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        trip, created = await paid_reservation()
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)
        await cancel.cancel(reservation_id=created.id, actor_id=40)

        with pytest.raises(AlreadyResolvedError):
            await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        assert len(store.rows('transactions')) == 1
        assert store.trip(trip.record_id).segments[0].available_seats == 5

    @pytest.mark.asyncio
    async def test_unpaid_reservation_has_nothing_to_refund(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        # Arrange
        trip, created = await paid_reservation(payment_status=PaymentStatus.PENDING)
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        with pytest.raises(DomainError):
            await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        # Assert
        assert store.trip(trip.record_id).segments[0].available_seats == 3
        reservation = await GetReservationUseCase(uow=uow).get_reservation(
            reservation_id=created.id
        )
        assert reservation.status == ReservationStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_failed_transaction_removal_keeps_seats_and_payment(
        self, uow, seat_ledger_service, store, paid_reservation
    ) -> None:
        # Arrange
        trip, created = await paid_reservation()
        uow.transaction_repo.delete = AsyncMock(side_effect=RuntimeError('storage offline'))
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        # Act
        with pytest.raises(RuntimeError):
            await cancel.cancel_and_refund(reservation_id=created.id, actor_id=40)

        # Assert
        assert store.trip(trip.record_id).segments[0].available_seats == 3
        assert len(store.rows('transactions')) == 1
        reservation = await GetReservationUseCase(uow=uow).get_reservation(
            reservation_id=created.id
        )
        assert reservation.status == ReservationStatus.CONFIRMED
        assert reservation.payment_status == PaymentStatus.PAID

    @pytest.mark.asyncio
    async def test_refund_missing_reservation_is_not_found(
        self, uow, seat_ledger_service
    ) -> None:
        cancel = CancelReservationUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(NotFoundError):
            await cancel.cancel_and_refund(reservation_id=77, actor_id=31)
