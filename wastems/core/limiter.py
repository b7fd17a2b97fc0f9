"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and route modules can use the same
instance without circular imports. One application-wide limit applies to
every route, counted per client address; SlowAPIMiddleware enforces it.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from wastems.core.config import get_settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def _application_limit() -> str:
    # Resolved per request so tests can change RATE_LIMIT and clear the settings cache.
    return get_settings().rate_limit


limiter = Limiter(key_func=get_remote_address, application_limits=[_application_limit])
