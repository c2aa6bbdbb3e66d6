"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules (e.g. auth) can use
the same instance without circular imports. The global window comes from
settings (RATE_LIMIT_MAX_REQUESTS per RATE_LIMIT_WINDOW_SECONDS); login has
its own tighter limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.rate_limit_default],
    enabled=_settings.rate_limit_enabled,
)

LOGIN_LIMIT = _settings.login_rate_limit

limit_auth = limiter.limit(LOGIN_LIMIT)
