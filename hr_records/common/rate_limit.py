"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance that routers can import for
per-endpoint limits; it is wired into the FastAPI app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from hr_records.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.ENVIRONMENT != "test",
)
