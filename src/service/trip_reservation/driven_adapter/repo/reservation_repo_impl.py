from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.interface.i_reservation_repo import IReservationRepo
from src.service.trip_reservation.domain.entity.reservation_entity import Passenger, Reservation
from src.service.trip_reservation.domain.enum.payment import PaymentMethod, PaymentStatus
from src.service.trip_reservation.domain.enum.reservation_status import ReservationStatus
from src.service.trip_reservation.driven_adapter.model.reservation_model import (
    PassengerModel,
    ReservationModel,
)


class ReservationRepoImpl(IReservationRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _passenger_to_entity(db_passenger: PassengerModel) -> Passenger:
        return Passenger(
            first_name=db_passenger.first_name,
            last_name=db_passenger.last_name,
            reservation_id=db_passenger.reservation_id,
            id=db_passenger.id,
        )

    @staticmethod
    def _to_entity(db_reservation: ReservationModel, *, with_passengers: bool) -> Reservation:
        # Only touch the relationship when it was loaded; lazy loading is not allowed under asyncio
        passengers = (
            [ReservationRepoImpl._passenger_to_entity(p) for p in db_reservation.passengers]
            if with_passengers
            else []
        )
        return Reservation(
            trip_id=db_reservation.trip_id,
            seat_count=db_reservation.seat_count,
            total_amount=db_reservation.total_amount,
            payment_method=PaymentMethod(db_reservation.payment_method),
            payment_status=PaymentStatus(db_reservation.payment_status),
            created_by=db_reservation.created_by,
            advance_amount=db_reservation.advance_amount,
            advance_payment_method=(
                PaymentMethod(db_reservation.advance_payment_method)
                if db_reservation.advance_payment_method
                else None
            ),
            status=ReservationStatus(db_reservation.status),
            phone=db_reservation.phone,
            email=db_reservation.email,
            notes=db_reservation.notes,
            source_request_id=db_reservation.source_request_id,
            passengers=passengers,
            id=db_reservation.id,
            created_at=db_reservation.created_at,
            updated_at=db_reservation.updated_at,
        )

    @Logger.io
    async def create(self, *, reservation: Reservation) -> Reservation:
        trip_ref = reservation.trip_ref
        db_reservation = ReservationModel(
            trip_id=reservation.trip_id,
            record_id=trip_ref.record_id,
            seat_count=reservation.seat_count,
            total_amount=reservation.total_amount,
            advance_amount=reservation.advance_amount,
            payment_method=reservation.payment_method.value,
            advance_payment_method=(
                reservation.advance_payment_method.value
                if reservation.advance_payment_method
                else None
            ),
            payment_status=reservation.payment_status.value,
            status=reservation.status.value,
            phone=reservation.phone,
            email=reservation.email,
            notes=reservation.notes,
            created_by=reservation.created_by,
            source_request_id=reservation.source_request_id,
        )
        self.session.add(db_reservation)
        await self.session.flush()
        await self.session.refresh(db_reservation, attribute_names=['created_at', 'updated_at'])

        return self._to_entity(db_reservation, with_passengers=False)

    @Logger.io
    async def add_passengers(
        self, *, reservation_id: int, passengers: list[Passenger]
    ) -> list[Passenger]:
        db_passengers = [
            PassengerModel(
                reservation_id=reservation_id,
                first_name=passenger.first_name,
                last_name=passenger.last_name,
            )
            for passenger in passengers
        ]
        self.session.add_all(db_passengers)
        await self.session.flush()

        return [self._passenger_to_entity(p) for p in db_passengers]

    @Logger.io
    async def get_by_id(self, *, reservation_id: int) -> Reservation | None:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .execution_options(populate_existing=True)
        )
        db_reservation = result.scalar_one_or_none()
        return self._to_entity(db_reservation, with_passengers=True) if db_reservation else None

    @Logger.io
    async def get_for_update(self, *, reservation_id: int) -> Reservation | None:
        result = await self.session.execute(
            select(ReservationModel)
            .where(ReservationModel.id == reservation_id)
            .with_for_update(of=ReservationModel)
            .execution_options(populate_existing=True)
        )
        db_reservation = result.scalar_one_or_none()
        return self._to_entity(db_reservation, with_passengers=True) if db_reservation else None

    @Logger.io
    async def update_status(self, *, reservation: Reservation) -> Reservation:
        result = await self.session.execute(
            sql_update(ReservationModel)
            .where(ReservationModel.id == reservation.id)
            .values(
                status=reservation.status.value,
                payment_status=reservation.payment_status.value,
                updated_at=reservation.updated_at,
            )
            .returning(ReservationModel.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f'Reservation {reservation.id} not found')

        return reservation
