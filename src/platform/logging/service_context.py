"""
Service context for log lines.

Identifies which process wrote a log line: service name, deploy environment and
the process (or container task) id.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'trip-reservation')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container runtimes expose a task id; fall back to the PID locally
    task_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{task_id}'
