"""
Unit of Work Pattern - one database session shared by all repositories

Architecture:
- UoW owns the transaction: commit on success, rollback on everything else
- Repositories get the shared session through the UoW
- Use cases coordinate several repositories inside one UoW
- Lock waits, statement timeouts and pool exhaustion surface as
  TransientFailureError so callers can retry
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import get_async_session
from src.platform.exception.exceptions import TransientFailureError
from src.platform.logging.loguru_io import Logger


if TYPE_CHECKING:
    from src.service.trip_reservation.app.interface.i_package_repo import IPackageRepo
    from src.service.trip_reservation.app.interface.i_reservation_repo import IReservationRepo
    from src.service.trip_reservation.app.interface.i_reservation_request_repo import (
        IReservationRequestRepo,
    )
    from src.service.trip_reservation.app.interface.i_transaction_repo import ITransactionRepo
    from src.service.trip_reservation.app.interface.i_trip_command_repo import ITripCommandRepo
    from src.service.trip_reservation.app.interface.i_trip_query_repo import ITripQueryRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the Trip Reservation Service

    Usage:
        async with uow:
            request = await uow.reservation_request_repo.get_for_update(request_id=...)
            await uow.reservation_request_repo.update(request=request.reject(...))
            await uow.commit()

    Leaving the block without commit() rolls everything back.
    """

    # Trip repositories
    trip_command_repo: ITripCommandRepo
    trip_query_repo: ITripQueryRepo

    # Reservation repositories
    reservation_request_repo: IReservationRequestRepo
    reservation_repo: IReservationRepo
    transaction_repo: ITransactionRepo

    # Package repositories
    package_repo: IPackageRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Usage in use case:
        async with uow:
            trip = await uow.trip_command_repo.get_for_update(record_id=...)
            await uow.commit()
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        from src.service.trip_reservation.driven_adapter.repo.package_repo_impl import (
            PackageRepoImpl,
        )
        from src.service.trip_reservation.driven_adapter.repo.reservation_repo_impl import (
            ReservationRepoImpl,
        )
        from src.service.trip_reservation.driven_adapter.repo.reservation_request_repo_impl import (
            ReservationRequestRepoImpl,
        )
        from src.service.trip_reservation.driven_adapter.repo.transaction_repo_impl import (
            TransactionRepoImpl,
        )
        from src.service.trip_reservation.driven_adapter.repo.trip_command_repo_impl import (
            TripCommandRepoImpl,
        )
        from src.service.trip_reservation.driven_adapter.repo.trip_query_repo_impl import (
            TripQueryRepoImpl,
        )

        # Create repositories with shared session
        self.trip_command_repo = TripCommandRepoImpl(session=self.session)
        self.trip_query_repo = TripQueryRepoImpl(session=self.session)
        self.reservation_request_repo = ReservationRequestRepoImpl(session=self.session)
        self.reservation_repo = ReservationRepoImpl(session=self.session)
        self.transaction_repo = TransactionRepoImpl(session=self.session)
        self.package_repo = PackageRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, exc_type, exc, tb):
        await super().__aexit__(exc_type, exc, tb)
        # Note: session cleanup handled by get_async_session context manager
        if isinstance(exc, (OperationalError, PoolTimeoutError)):
            Logger.base.warning(f'⏳ [UOW] Transient database failure: {exc}')
            raise TransientFailureError('Database is busy, retry the operation') from exc

    async def _commit(self):
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """
    FastAPI dependency for Unit of Work

    Usage:
        async def approve(uow: AbstractUnitOfWork = Depends(get_unit_of_work)):
            async with uow:
                ...
                await uow.commit()
    """
    return SqlAlchemyUnitOfWork(session)
