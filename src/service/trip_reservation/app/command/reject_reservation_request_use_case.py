from typing import Optional, Self

from fastapi import Depends
from opentelemetry import trace

from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.trip_reservation.domain.entity.reservation_request_entity import (
    ReservationRequest,
)


class RejectReservationRequestUseCase:
    """Pending -> rejected. Seats are never touched: nothing was reserved for a pending request."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def reject(
        self, *, request_id: int, approver_id: int, reason: Optional[str] = None
    ) -> ReservationRequest:
        with self.tracer.start_as_current_span(
            'use_case.reject_reservation_request',
            attributes={'request_id': request_id, 'approver_id': approver_id},
        ):
            try:
                async with self.uow:
                    request = await self.uow.reservation_request_repo.get_for_update(
                        request_id=request_id
                    )
                    if request is None:
                        raise NotFoundError(f'Reservation request {request_id} not found')

                    rejected = await self.uow.reservation_request_repo.update(
                        request=request.reject(approver_id=approver_id, reason=reason)
                    )
                    await self.uow.commit()
            except CustomBaseError as e:
                metrics.record_resolution(action='reject', result=e.error_code)
                raise

            metrics.record_resolution(action='reject', result='success')
            Logger.base.info(f'🚫 [REJECT] Request {request_id} rejected by {approver_id}')
            return rejected
