from typing import Self

from fastapi import Depends

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.payment import PaymentMethod


class MarkPackagePaidUseCase:
    """Record payment for a package; the actor who collected the money owns the transaction"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def mark_paid(
        self, *, package_id: int, actor_id: int, method: PaymentMethod
    ) -> tuple[Package, Transaction]:
        async with self.uow:
            package = await self.uow.package_repo.get_for_update(package_id=package_id)
            if package is None:
                raise NotFoundError(f'Package {package_id} not found')

            paid = await self.uow.package_repo.update(
                package=package.mark_paid(actor_id=actor_id, method=method)
            )
            transaction = await self.uow.transaction_repo.create(
                transaction=paid.payment_transaction()
            )
            await self.uow.commit()

        Logger.base.info(f'💰 [PACKAGE] Package {package_id} paid ({method}) to {actor_id}')
        return paid, transaction


class MarkPackageDeliveredUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def mark_delivered(self, *, package_id: int, actor_id: int) -> Package:
        async with self.uow:
            package = await self.uow.package_repo.get_for_update(package_id=package_id)
            if package is None:
                raise NotFoundError(f'Package {package_id} not found')

            delivered = await self.uow.package_repo.update(
                package=package.mark_delivered(actor_id=actor_id)
            )
            await self.uow.commit()

        return delivered
