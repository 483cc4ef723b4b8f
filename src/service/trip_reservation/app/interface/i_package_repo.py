from abc import ABC, abstractmethod

from src.service.trip_reservation.domain.entity.package_entity import Package


class IPackageRepo(ABC):
    @abstractmethod
    async def create(self, *, package: Package) -> Package:
        pass

    @abstractmethod
    async def get_for_update(self, *, package_id: int) -> Package | None:
        pass

    @abstractmethod
    async def update(self, *, package: Package) -> Package:
        pass

    @abstractmethod
    async def list_by_record_ids(self, *, record_ids: list[int]) -> list[Package]:
        """Packages on any leg of the given trip records"""
        pass
