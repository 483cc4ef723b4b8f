"""
Test Configuration

Environment setup MUST happen before any application import: settings and the
loguru sinks are built at import time.

Architecture:
- Unit tests (test/**/unit/): in-memory unit of work and repositories, no database
- HTTP tests: FastAPI TestClient with use case dependencies overridden
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    os.environ['POSTGRES_DB'] = (
        'trip_reservation_test_db'
        if worker_id == 'master'
        else f'trip_reservation_test_db_{worker_id}'
    )

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('AUTO_CREATE_TABLES', 'false')
    os.environ.setdefault('RECORD_LOCK_TIMEOUT_SECONDS', '2')


# Call immediately to set env vars before any imports
_early_setup_test_environment()
