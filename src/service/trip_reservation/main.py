"""
Trip Reservation Service - Main Application

Run with:
    granian --interface asgi src.service.trip_reservation.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config import di
from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Trip Reservation] Starting up...')

    tracing = TracingConfig(service_name='trip-reservation-service')
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('📊 [Trip Reservation] OpenTelemetry tracing configured')

    di.setup()
    Logger.base.info(
        f'🔌 [Trip Reservation] Container ready (seat sharing: {settings.SEAT_SHARING_MODE})'
    )

    if settings.AUTO_CREATE_TABLES:
        await create_db_and_tables()
        Logger.base.info('🗄️  [Trip Reservation] Database tables ensured')

    try:
        yield
    finally:
        Logger.base.info('🛑 [Trip Reservation] Shutting down...')
        await dispose_engine()
        di.cleanup()
        tracing.shutdown()


app = create_app(lifespan=lifespan)
