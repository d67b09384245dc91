"""API utilities and dependencies.

This package contains shared API utilities:
- deps: FastAPI dependency injection functions
"""

from .deps import (
    get_client_ip,
    get_credential,
    get_dispatcher,
    get_sessions,
    http_status_for,
)

__all__ = [
    "get_credential",
    "get_dispatcher",
    "get_sessions",
    "get_client_ip",
    "http_status_for",
]
