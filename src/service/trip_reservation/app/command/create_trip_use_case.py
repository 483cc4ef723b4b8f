from datetime import date
from typing import List, Optional, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.trip_entity import Trip
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility
from src.service.trip_reservation.domain.value_object.segment_time import SegmentTime


class CreateTripUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def create_trip(
        self,
        *,
        original_date: date,
        capacity: int,
        stops: List[str],
        legs: List[tuple[str, str, str, str]],
        visibility: TripVisibility = TripVisibility.PUBLISHED,
        vehicle_id: Optional[int] = None,
        driver_id: Optional[int] = None,
    ) -> Trip:
        """
        Publish a trip.

        Each leg is (origin, destination, departure_label, arrival_label). Labels
        are parsed strictly here; a new trip is rejected rather than stored with
        a guessed day offset.
        """
        trip = Trip.create(
            original_date=original_date,
            capacity=capacity,
            stops=stops,
            legs=[
                (
                    origin,
                    destination,
                    SegmentTime.parse_strict(departure),
                    SegmentTime.parse_strict(arrival),
                )
                for origin, destination, departure, arrival in legs
            ],
            visibility=visibility,
            vehicle_id=vehicle_id,
            driver_id=driver_id,
        )

        async with self.uow:
            created = await self.uow.trip_command_repo.create(trip=trip)
            await self.uow.commit()

        Logger.base.info(
            f'🚌 [TRIP] Created trip {created.record_id} on {created.original_date} '
            f'with {len(created.segments)} segment(s)'
        )
        return created
