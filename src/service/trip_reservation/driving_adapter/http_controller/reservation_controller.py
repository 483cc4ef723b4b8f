from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.trip_reservation.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from src.service.trip_reservation.app.query.get_reservation_use_case import GetReservationUseCase
from src.service.trip_reservation.driving_adapter.http_controller.auth.current_user import (
    CurrentUserInfo,
    get_current_user,
)
from src.service.trip_reservation.driving_adapter.http_controller.schema.reservation_schema import (
    ReservationPayload,
    ReservationResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: ReservationPayload,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.create_reservation(
        actor_id=current_user.user_id,
        trip_id=request.trip_id,
        passengers=[passenger.to_value() for passenger in request.passengers],
        total_amount=request.total_amount,
        payment_method=request.payment_method,
        payment_status=request.payment_status,
        advance_amount=request.advance_amount,
        advance_payment_method=request.advance_payment_method,
        phone=request.phone,
        email=request.email,
        notes=request.notes,
    )
    return ReservationResponse.from_entity(reservation)


@router.get('/{reservation_id}')
@Logger.io
async def get_reservation(
    reservation_id: int,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: GetReservationUseCase = Depends(GetReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.get_reservation(reservation_id=reservation_id)
    return ReservationResponse.from_entity(reservation)


@router.patch('/{reservation_id}/cancel')
@Logger.io
async def cancel_reservation(
    reservation_id: int,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.cancel(
        reservation_id=reservation_id, actor_id=current_user.user_id
    )
    return ReservationResponse.from_entity(reservation)


@router.post('/{reservation_id}/cancel_refund')
@Logger.io
async def cancel_and_refund_reservation(
    reservation_id: int,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> ReservationResponse:
    reservation = await use_case.cancel_and_refund(
        reservation_id=reservation_id, actor_id=current_user.user_id
    )
    return ReservationResponse.from_entity(reservation)
