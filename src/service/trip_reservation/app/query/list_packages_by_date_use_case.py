from datetime import date
from typing import List, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.segment_date_resolver import segment_departs_on


class ListPackagesByDateUseCase:
    """Packages travelling on a calendar day, judged by their leg's resolved departure date"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def list_by_date(self, *, day: date) -> List[Package]:
        async with self.uow:
            trips = await self.uow.trip_query_repo.list_published(departing_around=day)
            trips_by_record = {trip.record_id: trip for trip in trips}
            packages = await self.uow.package_repo.list_by_record_ids(
                record_ids=list(trips_by_record)
            )

        result = []
        for package in packages:
            ref = package.trip_ref
            trip = trips_by_record.get(ref.record_id)
            if trip is None or ref.segment_index >= len(trip.segments):
                continue
            if segment_departs_on(trip, ref.segment_index, day):
                result.append(package)
        return result
