from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_trip_query_repo import ITripQueryRepo
from src.service.trip_reservation.domain.entity.trip_entity import MAX_DAY_OFFSET, Trip
from src.service.trip_reservation.domain.enum.trip_visibility import TripVisibility
from src.service.trip_reservation.driven_adapter.model.trip_model import TripModel
from src.service.trip_reservation.driven_adapter.repo.trip_command_repo_impl import (
    trip_model_to_entity,
)


class TripQueryRepoImpl(ITripQueryRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @Logger.io
    async def list_published(self, *, departing_around: date | None = None) -> list[Trip]:
        stmt = select(TripModel).where(TripModel.visibility == TripVisibility.PUBLISHED.value)
        if departing_around is not None:
            # A leg departing on `departing_around` belongs to a trip dated at most
            # MAX_DAY_OFFSET days earlier
            stmt = stmt.where(
                TripModel.original_date.between(
                    departing_around - timedelta(days=MAX_DAY_OFFSET), departing_around
                )
            )
        result = await self.session.execute(stmt.order_by(TripModel.original_date, TripModel.id))
        return [
            trip_model_to_entity(db_trip, list(db_trip.segments))
            for db_trip in result.scalars().all()
        ]
