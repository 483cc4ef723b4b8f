from datetime import date, time
from typing import List, Optional, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.dto.trip_segment_view import TripSegmentView
from src.service.trip_reservation.domain.segment_date_resolver import segment_departs_on
from src.service.trip_reservation.domain.seat_ledger import validate_seat_count


def _departure_order(view: TripSegmentView) -> tuple:
    clock = view.departure_at.time() if view.departure_at else time.min
    return view.departure_date, clock, view.record_id, view.segment_index


class SearchTripSegmentsUseCase:
    """
    Expand published trips into bookable legs.

    The date filter compares against each leg's resolved departure date, so an
    overnight leg of a trip dated the 13th shows up when searching the 14th.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def search(
        self,
        *,
        day: Optional[date] = None,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        seats: Optional[int] = None,
    ) -> List[TripSegmentView]:
        if seats is not None:
            validate_seat_count(seats)

        async with self.uow:
            trips = await self.uow.trip_query_repo.list_published(departing_around=day)

        origin_filter = origin.strip().lower() if origin else None
        destination_filter = destination.strip().lower() if destination else None

        results = []
        for trip in trips:
            for index, segment in enumerate(trip.segments):
                if day is not None and not segment_departs_on(trip, index, day):
                    continue
                if origin_filter and origin_filter not in segment.origin.lower():
                    continue
                if destination_filter and destination_filter not in segment.destination.lower():
                    continue
                if seats is not None and segment.available_seats < seats:
                    continue
                results.append(TripSegmentView.from_trip(trip, index))

        results.sort(key=_departure_order)
        return results
