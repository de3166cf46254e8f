"""
Service context for log lines.

Identifies which process wrote a log line: `service@environment:instance`.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'concert-repository')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hosts expose HOSTNAME, local runs fall back to the PID
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
