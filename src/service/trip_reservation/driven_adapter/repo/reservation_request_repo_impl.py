from decimal import Decimal

from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_reservation_request_repo import (
    IReservationRequestRepo,
)
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.enum.reservation_status import ReservationRequestStatus
from src.service.trip_reservation.domain.value_object.passenger_info import PassengerInfo
from src.service.trip_reservation.driven_adapter.model.reservation_request_model import (
    ReservationRequestModel,
)


class ReservationRequestRepoImpl(IReservationRequestRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_entity(db_request: ReservationRequestModel) -> ReservationRequest:
        return ReservationRequest(
            trip_id=db_request.trip_id,
            seat_count=db_request.seat_count,
            passengers=[
                PassengerInfo(first_name=p['first_name'], last_name=p['last_name'])
                for p in db_request.passengers or []
            ],
            total_amount=Decimal(db_request.total_amount),
            payment_method=PaymentMethod(db_request.payment_method),
            payment_status=PaymentStatus(db_request.payment_status),
            requester_id=db_request.requester_id,
            advance_amount=Decimal(db_request.advance_amount or 0),
            advance_payment_method=(
                PaymentMethod(db_request.advance_payment_method)
                if db_request.advance_payment_method
                else None
            ),
            phone=db_request.phone,
            email=db_request.email,
            notes=db_request.notes,
            status=ReservationRequestStatus(db_request.status),
            reviewed_by=db_request.reviewed_by,
            review_notes=db_request.review_notes,
            last_failure_reason=db_request.last_failure_reason,
            id=db_request.id,
            created_at=db_request.created_at,
            updated_at=db_request.updated_at,
        )

    @Logger.io
    async def create(self, *, request: ReservationRequest) -> ReservationRequest:
        db_request = ReservationRequestModel(
            trip_id=request.trip_id,
            seat_count=request.seat_count,
            passengers=[
                {'first_name': p.first_name, 'last_name': p.last_name} for p in request.passengers
            ],
            total_amount=request.total_amount,
            payment_method=request.payment_method.value,
            payment_status=request.payment_status.value,
            advance_amount=request.advance_amount,
            advance_payment_method=(
                request.advance_payment_method.value if request.advance_payment_method else None
            ),
            phone=request.phone,
            email=request.email,
            notes=request.notes,
            requester_id=request.requester_id,
            status=request.status.value,
        )
        self.session.add(db_request)
        await self.session.flush()
        await self.session.refresh(db_request)

        return self._to_entity(db_request)

    @Logger.io
    async def get_by_id(self, *, request_id: int) -> ReservationRequest | None:
        db_request = await self.session.get(ReservationRequestModel, request_id)
        return self._to_entity(db_request) if db_request else None

    @Logger.io
    async def get_for_update(self, *, request_id: int) -> ReservationRequest | None:
        db_request = await self.session.get(
            ReservationRequestModel, request_id, with_for_update=True, populate_existing=True
        )
        return self._to_entity(db_request) if db_request else None

    @Logger.io
    async def update(self, *, request: ReservationRequest) -> ReservationRequest:
        result = await self.session.execute(
            sql_update(ReservationRequestModel)
            .where(ReservationRequestModel.id == request.id)
            .values(
                status=request.status.value,
                reviewed_by=request.reviewed_by,
                review_notes=request.review_notes,
                last_failure_reason=request.last_failure_reason,
                updated_at=request.updated_at,
            )
            .returning(ReservationRequestModel)
            .execution_options(populate_existing=True)
        )
        db_request = result.scalar_one_or_none()
        if not db_request:
            raise NotFoundError(f'Reservation request {request.id} not found')

        return self._to_entity(db_request)

    @Logger.io
    async def list_requests(
        self,
        *,
        status: ReservationRequestStatus | None = None,
        requester_id: int | None = None,
    ) -> list[ReservationRequest]:
        stmt = select(ReservationRequestModel)
        if status is not None:
            stmt = stmt.where(ReservationRequestModel.status == status.value)
        if requester_id is not None:
            stmt = stmt.where(ReservationRequestModel.requester_id == requester_id)
        stmt = stmt.order_by(
            ReservationRequestModel.created_at.desc(), ReservationRequestModel.id.desc()
        )

        result = await self.session.execute(stmt)
        return [self._to_entity(db_request) for db_request in result.scalars().all()]
