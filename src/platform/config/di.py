"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.state.record_lock import RecordLockRegistry
from src.service.trip_reservation.app.service.seat_ledger_service import SeatLedgerService


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Per-record locks shared by every request handled in this process
    record_lock_registry = providers.Singleton(
        RecordLockRegistry,
        timeout_seconds=config_service.provided.RECORD_LOCK_TIMEOUT_SECONDS,
    )

    # Seat ledger (stateless apart from the lock registry, so Singleton)
    seat_ledger_service = providers.Singleton(
        SeatLedgerService,
        record_locks=record_lock_registry,
        sharing_mode=config_service.provided.SEAT_SHARING_MODE,
    )


container = Container()


def setup() -> None:
    container.config_service()
    container.seat_ledger_service()


def cleanup() -> None:
    container.reset_singletons()
