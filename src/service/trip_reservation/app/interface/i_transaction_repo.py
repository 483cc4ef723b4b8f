from abc import ABC, abstractmethod

from src.service.trip_reservation.domain.entity.transaction_entity import Transaction
from src.service.trip_reservation.domain.enum.payment import TransactionSource


class ITransactionRepo(ABC):
    @abstractmethod
    async def create(self, *, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    async def list_by_source(
        self, *, source: TransactionSource, source_id: int
    ) -> list[Transaction]:
        pass

    @abstractmethod
    async def delete(self, *, transaction_id: int) -> None:
        pass
