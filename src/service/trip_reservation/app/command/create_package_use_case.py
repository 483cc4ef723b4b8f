from decimal import Decimal
from typing import Optional, Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.value_object.trip_segment_ref import TripSegmentRef


class CreatePackageUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def create_package(
        self,
        *,
        actor_id: int,
        trip_id: str,
        sender_name: str,
        recipient_name: str,
        price: Decimal,
        sender_phone: Optional[str] = None,
        recipient_phone: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Package:
        trip_ref = TripSegmentRef.parse(trip_id)
        package = Package.create(
            trip_id=trip_id,
            sender_name=sender_name,
            recipient_name=recipient_name,
            price=price,
            created_by=actor_id,
            sender_phone=sender_phone,
            recipient_phone=recipient_phone,
            description=description,
        )

        async with self.uow:
            trip = await self.uow.trip_command_repo.get_by_id(record_id=trip_ref.record_id)
            if trip is None:
                raise NotFoundError(f'Trip {trip_ref.record_id} not found')
            trip.segment(trip_ref.segment_index)

            created = await self.uow.package_repo.create(package=package)
            await self.uow.commit()

        return created
