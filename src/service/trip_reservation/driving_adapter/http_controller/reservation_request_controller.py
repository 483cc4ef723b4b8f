from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.command.approve_reservation_request_use_case import (
    ApproveReservationRequestUseCase,
)
from src.service.trip_reservation.app.command.create_reservation_request_use_case import (
    CreateReservationRequestUseCase,
)
from src.service.trip_reservation.app.command.reject_reservation_request_use_case import (
    RejectReservationRequestUseCase,
)
from src.service.trip_reservation.app.query.list_reservation_requests_use_case import (
    ListReservationRequestsUseCase,
)
from src.service.trip_reservation.domain.enum.reservation_status import ReservationRequestStatus
from src.service.trip_reservation.driving_adapter.http_controller.auth.current_user import (
    CurrentUserInfo,
    get_current_user,
)
from src.service.trip_reservation.driving_adapter.http_controller.schema.reservation_schema import (
    RejectRequest,
    ReservationRequestCreateRequest,
    ReservationRequestResponse,
    ReservationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation_request(
    request: ReservationRequestCreateRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CreateReservationRequestUseCase = Depends(CreateReservationRequestUseCase.depends),
) -> ReservationRequestResponse:
    created = await use_case.create_request(
        requester_id=current_user.user_id,
        trip_id=request.trip_id,
        passengers=[passenger.to_value() for passenger in request.passengers],
        total_amount=request.total_amount,
        payment_method=request.payment_method,
        payment_status=request.payment_status,
        seat_count=request.seat_count,
        advance_amount=request.advance_amount,
        advance_payment_method=request.advance_payment_method,
        phone=request.phone,
        email=request.email,
        notes=request.notes,
    )
    return ReservationRequestResponse.from_entity(created)


@router.get('')
@Logger.io
async def list_reservation_requests(
    request_status: Optional[ReservationRequestStatus] = Query(default=None, alias='status'),
    requester_id: Optional[int] = None,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ListReservationRequestsUseCase = Depends(ListReservationRequestsUseCase.depends),
) -> List[ReservationRequestResponse]:
    requests = await use_case.list_requests(status=request_status, requester_id=requester_id)
    return [ReservationRequestResponse.from_entity(request) for request in requests]


@router.post('/{request_id}/approve')
@Logger.io
async def approve_reservation_request(
    request_id: int,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ApproveReservationRequestUseCase = Depends(ApproveReservationRequestUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.approve_reservation_request') as span:
        span.set_attribute('request_id', request_id)
        span.set_attribute('approver_id', current_user.user_id)

        reservation = await use_case.approve(
            request_id=request_id, approver_id=current_user.user_id
        )
        return ReservationResponse.from_entity(reservation)


@router.post('/{request_id}/reject')
@Logger.io
async def reject_reservation_request(
    request_id: int,
    request: RejectRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: RejectReservationRequestUseCase = Depends(RejectReservationRequestUseCase.depends),
) -> ReservationRequestResponse:
    rejected = await use_case.reject(
        request_id=request_id, approver_id=current_user.user_id, reason=request.reason
    )
    return ReservationRequestResponse.from_entity(rejected)
