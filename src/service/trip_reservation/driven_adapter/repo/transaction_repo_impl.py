from sqlalchemy import delete as sql_delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_transaction_repo import ITransactionRepo
from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.payment import (
    PaymentMethod,
    TransactionKind,
    TransactionSource,
)
from src.service.trip_reservation.driven_adapter.model.transaction_model import TransactionModel


class TransactionRepoImpl(ITransactionRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_entity(db_transaction: TransactionModel) -> Transaction:
        return Transaction(
            amount=db_transaction.amount,
            method=PaymentMethod(db_transaction.method),
            kind=TransactionKind(db_transaction.kind),
            source=TransactionSource(db_transaction.source),
            source_id=db_transaction.source_id,
            user_id=db_transaction.user_id,
            id=db_transaction.id,
            created_at=db_transaction.created_at,
        )

    @Logger.io
    async def create(self, *, transaction: Transaction) -> Transaction:
        db_transaction = TransactionModel(
            amount=transaction.amount,
            method=transaction.method.value,
            kind=transaction.kind.value,
            source=transaction.source.value,
            source_id=transaction.source_id,
            user_id=transaction.user_id,
        )
        self.session.add(db_transaction)
        await self.session.flush()
        await self.session.refresh(db_transaction)

        return self._to_entity(db_transaction)

    @Logger.io
    async def list_by_source(
        self, *, source: TransactionSource, source_id: int
    ) -> list[Transaction]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(
                TransactionModel.source == source.value,
                TransactionModel.source_id == source_id,
            )
            .order_by(TransactionModel.id)
        )
        return [self._to_entity(db_transaction) for db_transaction in result.scalars().all()]

    @Logger.io
    async def delete(self, *, transaction_id: int) -> None:
        result = await self.session.execute(
            sql_delete(TransactionModel)
            .where(TransactionModel.id == transaction_id)
            .returning(TransactionModel.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f'Transaction {transaction_id} not found')
