"""
Global slowapi rate limiter.

Imported by routers for per-endpoint limits.  Mounted onto app.state in
main.py so slowapi middleware can find it.

Storage: RATE_LIMIT_STORAGE_URL (set it to the Redis URL in deployed
environments so every worker shares the same counters).  Defaults to
in-memory storage for local development and tests.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_url,
    enabled=_settings.rate_limit_enabled,
)
