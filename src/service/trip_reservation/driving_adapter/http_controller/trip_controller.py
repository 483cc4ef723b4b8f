from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.trip_reservation.app.command.create_trip_use_case import CreateTripUseCase
from src.service.trip_reservation.app.command.update_seats_use_case import (
    ReleaseSeatsUseCase,
    ReserveSeatsUseCase,
)
from src.service.trip_reservation.app.query.check_seat_availability_use_case import (
    CheckSeatAvailabilityUseCase,
)
from src.service.trip_reservation.app.query.get_trip_use_case import GetTripUseCase
from src.service.trip_reservation.app.query.search_trip_segments_use_case import (
    SearchTripSegmentsUseCase,
)
from src.service.trip_reservation.driving_adapter.http_controller.auth.current_user import (
    CurrentUserInfo,
    get_current_user,
)
from src.service.trip_reservation.driving_adapter.http_controller.schema.trip_schema import (
    SeatAvailabilityResponse,
    SeatCountRequest,
    TripCreateRequest,
    TripResponse,
    TripSegmentResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_trip(
    request: TripCreateRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: CreateTripUseCase = Depends(CreateTripUseCase.depends),
) -> TripResponse:
    trip = await use_case.create_trip(
        original_date=request.original_date,
        capacity=request.capacity,
        stops=request.stops,
        legs=[
            (leg.origin, leg.destination, leg.departure_time, leg.arrival_time)
            for leg in request.segments
        ],
        visibility=request.visibility,
        vehicle_id=request.vehicle_id,
        driver_id=request.driver_id,
    )
    return TripResponse.from_entity(trip)


@router.get('/segments/search')
@Logger.io
async def search_trip_segments(
    day: Optional[date] = Query(
        default=None, alias='date', description='Resolved departure date of the leg'
    ),
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    seats: Optional[int] = Query(default=None, gt=0),
    use_case: SearchTripSegmentsUseCase = Depends(SearchTripSegmentsUseCase.depends),
) -> List[TripSegmentResponse]:
    views = await use_case.search(day=day, origin=origin, destination=destination, seats=seats)
    return [TripSegmentResponse.from_view(view) for view in views]


@router.get('/segments/{trip_id}/availability')
@Logger.io
async def check_seat_availability(
    trip_id: str,
    seats: int = Query(default=1, gt=0),
    use_case: CheckSeatAvailabilityUseCase = Depends(CheckSeatAvailabilityUseCase.depends),
) -> SeatAvailabilityResponse:
    availability = await use_case.check(trip_id=trip_id, seats=seats)
    return SeatAvailabilityResponse.from_value(trip_id, availability)


@router.post('/segments/{trip_id}/reserve')
@Logger.io
async def reserve_seats(
    trip_id: str,
    request: SeatCountRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ReserveSeatsUseCase = Depends(ReserveSeatsUseCase.depends),
) -> TripResponse:
    trip = await use_case.reserve(trip_id=trip_id, seats=request.seats)
    return TripResponse.from_entity(trip)


@router.post('/segments/{trip_id}/release')
@Logger.io
async def release_seats(
    trip_id: str,
    request: SeatCountRequest,
    current_user: CurrentUserInfo = Depends(get_current_user),
    use_case: ReleaseSeatsUseCase = Depends(ReleaseSeatsUseCase.depends),
) -> TripResponse:
    trip = await use_case.release(trip_id=trip_id, seats=request.seats)
    return TripResponse.from_entity(trip)


@router.get('/{record_id}')
@Logger.io
async def get_trip(
    record_id: int,
    use_case: GetTripUseCase = Depends(GetTripUseCase.depends),
) -> TripResponse:
    trip = await use_case.get_trip(record_id=record_id)
    return TripResponse.from_entity(trip)
