"""Unit tests for SqlAlchemyUnitOfWork transaction boundaries"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.exception.exceptions import TransientFailureError


@pytest.fixture
def mock_session() -> AsyncMock:
    return AsyncMock()


@pytest.mark.unit
class TestSqlAlchemyUnitOfWork:
    @pytest.mark.asyncio
    async def test_commit_then_exit(self, mock_session: AsyncMock) -> None:
        # Arrange
        uow = SqlAlchemyUnitOfWork(mock_session)

        # Act
        async with uow:
            await uow.commit()

        # Assert
        mock_session.commit.assert_awaited_once()
        assert uow.trip_command_repo.session is mock_session
        assert uow.reservation_request_repo.session is mock_session

    @pytest.mark.asyncio
    async def test_exit_without_commit_rolls_back(self, mock_session: AsyncMock) -> None:
        uow = SqlAlchemyUnitOfWork(mock_session)

        with pytest.raises(RuntimeError):
            async with uow:
                raise RuntimeError('boom')

        mock_session.rollback.assert_awaited()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lock_timeout_becomes_transient_failure(self, mock_session: AsyncMock) -> None:
        # Arrange
        uow = SqlAlchemyUnitOfWork(mock_session)

        # Act
        with pytest.raises(TransientFailureError) as exc_info:
            async with uow:
                raise OperationalError('SELECT 1', {}, Exception('lock timeout'))

        # Assert
        assert exc_info.value.status_code == 503
        mock_session.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_pool_exhaustion_becomes_transient_failure(self, mock_session: AsyncMock) -> None:
        uow = SqlAlchemyUnitOfWork(mock_session)

        with pytest.raises(TransientFailureError):
            async with uow:
                raise PoolTimeoutError('QueuePool limit reached')
