from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_package_repo import IPackageRepo
from src.service.trip_reservation.domain.entity.package_entity import Package
from src.service.trip_reservation.domain.enum.delivery_status import DeliveryStatus
from src.service.trip_reservation.domain.enum.payment import PaymentMethod
from src.service.trip_reservation.driven_adapter.model.package_model import PackageModel


class PackageRepoImpl(IPackageRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_entity(db_package: PackageModel) -> Package:
        return Package(
            trip_id=db_package.trip_id,
            sender_name=db_package.sender_name,
            recipient_name=db_package.recipient_name,
            price=db_package.price,
            created_by=db_package.created_by,
            sender_phone=db_package.sender_phone,
            recipient_phone=db_package.recipient_phone,
            description=db_package.description,
            is_paid=db_package.is_paid,
            payment_method=(
                PaymentMethod(db_package.payment_method) if db_package.payment_method else None
            ),
            paid_by=db_package.paid_by,
            paid_at=db_package.paid_at,
            delivery_status=DeliveryStatus(db_package.delivery_status),
            delivered_at=db_package.delivered_at,
            delivered_by=db_package.delivered_by,
            id=db_package.id,
            created_at=db_package.created_at,
        )

    @Logger.io
    async def create(self, *, package: Package) -> Package:
        db_package = PackageModel(
            trip_id=package.trip_id,
            record_id=package.trip_ref.record_id,
            sender_name=package.sender_name,
            sender_phone=package.sender_phone,
            recipient_name=package.recipient_name,
            recipient_phone=package.recipient_phone,
            description=package.description,
            price=package.price,
            is_paid=package.is_paid,
            delivery_status=package.delivery_status.value,
            created_by=package.created_by,
        )
        self.session.add(db_package)
        await self.session.flush()
        await self.session.refresh(db_package)

        return self._to_entity(db_package)

    @Logger.io
    async def get_for_update(self, *, package_id: int) -> Package | None:
        db_package = await self.session.get(
            PackageModel, package_id, with_for_update=True, populate_existing=True
        )
        return self._to_entity(db_package) if db_package else None

    @Logger.io
    async def update(self, *, package: Package) -> Package:
        result = await self.session.execute(
            sql_update(PackageModel)
            .where(PackageModel.id == package.id)
            .values(
                is_paid=package.is_paid,
                payment_method=package.payment_method.value if package.payment_method else None,
                paid_by=package.paid_by,
                paid_at=package.paid_at,
                delivery_status=package.delivery_status.value,
                delivered_at=package.delivered_at,
                delivered_by=package.delivered_by,
            )
            .returning(PackageModel)
            .execution_options(populate_existing=True)
        )
        db_package = result.scalar_one_or_none()
        if not db_package:
            raise NotFoundError(f'Package {package.id} not found')

        return self._to_entity(db_package)

    @Logger.io
    async def list_by_record_ids(self, *, record_ids: list[int]) -> list[Package]:
        if not record_ids:
            return []
        result = await self.session.execute(
            select(PackageModel)
            .where(PackageModel.record_id.in_(record_ids))
            .order_by(PackageModel.id)
        )
        return [self._to_entity(db_package) for db_package in result.scalars().all()]
