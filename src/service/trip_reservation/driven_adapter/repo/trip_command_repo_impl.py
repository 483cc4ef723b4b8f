from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvariantViolationError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_trip_command_repo import ITripCommandRepo
from src.service.trip_reservation.domain.entity.trip_entity import Segment, Trip
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility
from src.service.trip_reservation.domain.value_object.segment_time import SegmentTime
from src.service.trip_reservation.driven_adapter.model.trip_model import (
    TripModel,
    TripSegmentModel,
)


def trip_model_to_entity(db_trip: TripModel, db_segments: list[TripSegmentModel]) -> Trip:
    return Trip(
        original_date=db_trip.original_date,
        capacity=db_trip.capacity,
        stops=list(db_trip.stops or []),
        segments=[
            Segment(
                origin=db_segment.origin,
                destination=db_segment.destination,
                departure=SegmentTime(
                    clock=db_segment.departure_clock, day_offset=db_segment.departure_day_offset
                ),
                arrival=SegmentTime(
                    clock=db_segment.arrival_clock, day_offset=db_segment.arrival_day_offset
                ),
                capacity=db_segment.capacity,
                available_seats=db_segment.available_seats,
            )
            for db_segment in sorted(db_segments, key=lambda s: s.segment_index)
        ],
        visibility=TripVisibility(db_trip.visibility),
        vehicle_id=db_trip.vehicle_id,
        driver_id=db_trip.driver_id,
        record_id=db_trip.id,
        created_at=db_trip.created_at,
    )


class TripCommandRepoImpl(ITripCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @Logger.io
    async def create(self, *, trip: Trip) -> Trip:
        db_trip = TripModel(
            original_date=trip.original_date,
            capacity=trip.capacity,
            stops=list(trip.stops),
            visibility=trip.visibility.value,
            vehicle_id=trip.vehicle_id,
            driver_id=trip.driver_id,
            segments=[
                TripSegmentModel(
                    segment_index=index,
                    origin=segment.origin,
                    destination=segment.destination,
                    departure_clock=segment.departure.clock,
                    departure_day_offset=segment.departure.day_offset,
                    arrival_clock=segment.arrival.clock,
                    arrival_day_offset=segment.arrival.day_offset,
                    capacity=segment.capacity,
                    available_seats=segment.available_seats,
                )
                for index, segment in enumerate(trip.segments)
            ],
        )
        self.session.add(db_trip)
        await self.session.flush()
        await self.session.refresh(db_trip, attribute_names=['created_at', 'segments'])

        return trip_model_to_entity(db_trip, list(db_trip.segments))

    @Logger.io
    async def get_by_id(self, *, record_id: int) -> Trip | None:
        db_trip = await self.session.get(TripModel, record_id)
        if db_trip is None:
            return None
        return trip_model_to_entity(db_trip, list(db_trip.segments))

    @Logger.io
    async def get_for_update(self, *, record_id: int) -> Trip | None:
        """Lock the trip's segment rows; the caller's transaction holds them until it ends"""
        db_trip = await self.session.get(TripModel, record_id, populate_existing=True)
        if db_trip is None:
            return None

        result = await self.session.execute(
            select(TripSegmentModel)
            .where(TripSegmentModel.record_id == record_id)
            .order_by(TripSegmentModel.segment_index)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return trip_model_to_entity(db_trip, list(result.scalars().all()))

    @Logger.io
    async def update_available_seats(self, *, trip: Trip) -> None:
        for index, segment in enumerate(trip.segments):
            if not segment.is_consistent():
                raise InvariantViolationError(
                    f'Refusing to store {segment.available_seats} available seats '
                    f'on trip {trip.record_id} segment {index}'
                )

        for index, segment in enumerate(trip.segments):
            await self.session.execute(
                sql_update(TripSegmentModel)
                .where(
                    TripSegmentModel.record_id == trip.record_id,
                    TripSegmentModel.segment_index == index,
                )
                .values(available_seats=segment.available_seats)
                .execution_options(synchronize_session='fetch')
            )
