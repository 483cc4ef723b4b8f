from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.command.create_package_use_case import CreatePackageUseCase
from src.service.trip_reservation.app.command.update_package_status_use_case import (
    MarkPackageDeliveredUseCase,
    MarkPackagePaidUseCase,
)
from src.service.trip_reservation.app.query.list_packages_by_date_use_case import (
    ListPackagesByDateUseCase,
)
from src.service.trip_reservation.driving_adapter.http_controller.auth.current_user import (
    CurrentUserInfo,
    get_current_user,
)
from src.service.trip_reservation.driving_adapter.http_controller.schema.package_schema import (
    PackageCreateRequest,
    PackagePaymentRequest,
    PackagePaymentResponse,
    PackageResponse,
)
from src.service.trip_reservation.driving_adapter.http_controller.schema.reservation_schema import (
    TransactionResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_package(
    request: PackageCreateRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CreatePackageUseCase = Depends(CreatePackageUseCase.depends),
) -> PackageResponse:
    package = await use_case.create_package(
        actor_id=current_user.user_id,
        trip_id=request.trip_id,
        sender_name=request.sender_name,
        recipient_name=request.recipient_name,
        price=request.price,
        sender_phone=request.sender_phone,
        recipient_phone=request.recipient_phone,
        description=request.description,
    )
    return PackageResponse.from_entity(package)


@router.get('')
@Logger.io
async def list_packages_by_date(
    day: date = Query(alias='date'),
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListPackagesByDateUseCase = Depends(ListPackagesByDateUseCase.depends),
) -> List[PackageResponse]:
    packages = await use_case.list_by_date(day=day)
    return [PackageResponse.from_entity(package) for package in packages]


@router.post('/{package_id}/pay')
@Logger.io
async def mark_package_paid(
    package_id: int,
    request: PackagePaymentRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: MarkPackagePaidUseCase = Depends(MarkPackagePaidUseCase.depends),
) -> PackagePaymentResponse:
    package, transaction = await use_case.mark_paid(
        package_id=package_id, actor_id=current_user.user_id, method=request.payment_method
    )
    return PackagePaymentResponse(
        package=PackageResponse.from_entity(package),
        transaction=TransactionResponse.from_entity(transaction),
    )


@router.post('/{package_id}/deliver')
@Logger.io
async def mark_package_delivered(
    package_id: int,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: MarkPackageDeliveredUseCase = Depends(MarkPackageDeliveredUseCase.depends),
) -> PackageResponse:
    package = await use_case.mark_delivered(package_id=package_id, actor_id=current_user.user_id)
    return PackageResponse.from_entity(package)
