"""Rate limiting (slowapi), keyed on the client address.

Routes pass ``current_rate_limit`` (a callable) to ``limiter.limit``, so the
limit is read per request. ``create_app`` sets it from its ``Settings``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from src.config import settings

limiter = Limiter(key_func=get_remote_address)

_rate_limit = settings.rate_limit


def configure_rate_limit(value: str) -> None:
    global _rate_limit
    _rate_limit = value


def current_rate_limit() -> str:
    return _rate_limit
