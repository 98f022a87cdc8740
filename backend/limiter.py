"""Shared slowapi rate limiter.

Lives in its own module so routers can decorate endpoints without importing
the application object.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from config import RATE_LIMIT_ENABLED

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
