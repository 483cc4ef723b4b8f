"""
Unit tests for trip creation, segment search and manual seat adjustments

Search filters legs on their resolved departure date, so the overnight leg of
a trip dated 2025-06-13 is found when searching 2025-06-14.
"""

from datetime import date

import attrs
import pytest

from src.platform.exception.exceptions import (
    DomainError,
    InsufficientCapacityError,
    MalformedTimeLabelError,
    NotFoundError,
)
from src.service.trip_reservation.app.command.create_trip_use_case import CreateTripUseCase
from src.service.trip_reservation.app.command.update_seats_use_case import (
    ReleaseSeatsUseCase,
    ReserveSeatsUseCase,
)
from src.service.trip_reservation.app.query.check_seat_availability_use_case import (
    CheckSeatAvailabilityUseCase,
)
from src.service.trip_reservation.app.query.get_trip_use_case import GetTripUseCase
from src.service.trip_reservation.app.query.search_trip_segments_use_case import (
    SearchTripSegmentsUseCase,
)
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility


@pytest.mark.unit
class TestCreateTrip:
    @pytest.mark.asyncio
    async def test_create_trip_persists_legs_at_full_capacity(self, uow, store) -> None:
        # Act
        trip = await CreateTripUseCase(uow=uow).create_trip(
            original_date=date(2025, 6, 13),
            capacity=14,
            stops=['North', 'Middle', 'South'],
            legs=[
                ('North', 'Middle', '10:00 PM', '11:45 PM'),
                ('Middle', 'South', '12:30 AM +1d', '04:00 AM +1d'),
            ],
        )

        # Assert
        assert trip.record_id is not None
        stored = store.trip(trip.record_id)
        assert [s.available_seats for s in stored.segments] == [14, 14]
        assert stored.segments[1].departure.day_offset == 1

    @pytest.mark.asyncio
    async def test_create_trip_rejects_malformed_label(self, uow, store) -> None:
        with pytest.raises(MalformedTimeLabelError):
            await CreateTripUseCase(uow=uow).create_trip(
                original_date=date(2025, 6, 13),
                capacity=14,
                stops=['North', 'South'],
                legs=[('North', 'South', 'late evening', '11:45 PM')],
            )
        assert store.rows('trips') == []

    @pytest.mark.asyncio
    async def test_create_trip_rejects_zero_capacity(self, uow) -> None:
        with pytest.raises(DomainError):
            await CreateTripUseCase(uow=uow).create_trip(
                original_date=date(2025, 6, 13),
                capacity=0,
                stops=['North', 'South'],
                legs=[('North', 'South', '10:00 PM', '11:45 PM')],
            )

    @pytest.mark.asyncio
    async def test_get_trip(self, uow, trip_factory) -> None:
        trip = trip_factory()

        found = await GetTripUseCase(uow=uow).get_trip(record_id=trip.record_id)

        assert found.record_id == trip.record_id
        with pytest.raises(NotFoundError):
            await GetTripUseCase(uow=uow).get_trip(record_id=9999)


@pytest.mark.unit
class TestSearchTripSegments:
    @pytest.mark.asyncio
    async def test_overnight_leg_is_found_on_next_day(self, uow, trip_factory) -> None:
        # Arrange
        trip = trip_factory(original_date=date(2025, 6, 13))
        use_case = SearchTripSegmentsUseCase(uow=uow)

        # Act
        on_13th = await use_case.search(day=date(2025, 6, 13))
        on_14th = await use_case.search(day=date(2025, 6, 14))

        # Assert
        assert [v.trip_id for v in on_13th] == [f'{trip.record_id}_0']
        assert [v.trip_id for v in on_14th] == [f'{trip.record_id}_1']
        assert on_14th[0].departure_date == date(2025, 6, 14)
        assert on_14th[0].departure_time == '03:00 AM +1d'

    @pytest.mark.asyncio
    async def test_origin_and_destination_match_case_insensitively(
        self, uow, trip_factory
    ) -> None:
        trip = trip_factory()

        views = await SearchTripSegmentsUseCase(uow=uow).search(origin='bravo', destination='PORT')

        assert [v.trip_id for v in views] == [f'{trip.record_id}_1']

    @pytest.mark.asyncio
    async def test_seat_filter_and_visibility(self, uow, store, trip_factory) -> None:
        # Arrange
        full = trip_factory(capacity=2)
        store.tables['trips'][full.record_id] = full.with_available_seats({0: 1, 1: 1})
        hidden = trip_factory(capacity=8)
        store.tables['trips'][hidden.record_id] = attrs.evolve(
            hidden, visibility=TripVisibility.HIDDEN
        )
        open_trip = trip_factory(capacity=8)

        # Act
        views = await SearchTripSegmentsUseCase(uow=uow).search(seats=2)

        # Assert
        assert {v.record_id for v in views} == {open_trip.record_id}

    @pytest.mark.asyncio
    async def test_results_ordered_by_departure(self, uow, trip_factory) -> None:
        # Arrange
        late = trip_factory(
            stops=['East', 'West'], legs=[('East', 'West', '09:00 PM', '11:00 PM')]
        )
        early = trip_factory(
            stops=['East', 'West'], legs=[('East', 'West', '06:00 AM', '08:00 AM')]
        )

        # Act
        views = await SearchTripSegmentsUseCase(uow=uow).search(day=date(2025, 6, 13))

        # Assert
        assert [v.record_id for v in views if v.origin == 'East'] == [
            early.record_id,
            late.record_id,
        ]


@pytest.mark.unit
class TestManualSeatAdjustments:
    @pytest.mark.asyncio
    async def test_reserve_then_release(
        self, uow, seat_ledger_service, store, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory(capacity=3)
        trip_id = f'{trip.record_id}_0'

        # Act
        reserved = await ReserveSeatsUseCase(
            uow=uow, seat_ledger_service=seat_ledger_service
        ).reserve(trip_id=trip_id, seats=2)
        released = await ReleaseSeatsUseCase(
            uow=uow, seat_ledger_service=seat_ledger_service
        ).release(trip_id=trip_id, seats=5)

        # Assert
        assert reserved.segments[0].available_seats == 1
        assert released.segments[0].available_seats == 3
        assert store.trip(trip.record_id).segments[0].available_seats == 3

    @pytest.mark.asyncio
    async def test_overlapping_mode_persists_every_affected_leg(
        self, uow, overlapping_seat_ledger_service, store, trip_factory
    ) -> None:
        # Arrange
        trip = trip_factory(
            capacity=4,
            stops=['A', 'B', 'C'],
            legs=[
                ('A', 'B', '08:00', '09:00'),
                ('B', 'C', '09:30', '10:30'),
                ('A', 'C', '08:00', '10:30'),
            ],
        )
        use_case = ReserveSeatsUseCase(uow=uow, seat_ledger_service=overlapping_seat_ledger_service)

        # Act
        await use_case.reserve(trip_id=f'{trip.record_id}_2', seats=3)

        # Assert
        assert [s.available_seats for s in store.trip(trip.record_id).segments] == [1, 1, 1]
        with pytest.raises(InsufficientCapacityError):
            await use_case.reserve(trip_id=f'{trip.record_id}_0', seats=2)

    @pytest.mark.asyncio
    async def test_check_availability(self, uow, seat_ledger_service, trip_factory) -> None:
        trip = trip_factory(capacity=3)
        use_case = CheckSeatAvailabilityUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        ok = await use_case.check(trip_id=f'{trip.record_id}_1', seats=3)
        too_many = await use_case.check(trip_id=f'{trip.record_id}_1', seats=4)

        assert ok.ok is True
        assert too_many.ok is False
        assert too_many.available == 3

    @pytest.mark.asyncio
    async def test_unknown_segment_is_not_found(
        self, uow, seat_ledger_service, trip_factory
    ) -> None:
        trip = trip_factory()
        use_case = CheckSeatAvailabilityUseCase(uow=uow, seat_ledger_service=seat_ledger_service)

        with pytest.raises(NotFoundError):
            await use_case.check(trip_id=f'{trip.record_id}_5', seats=1)
