"""slowapi limiter, keyed by client address. One per application so each app's limits and counters stay separate."""
from slowapi import Limiter
from slowapi.util import get_remote_address


def create_limiter() -> Limiter:
    return Limiter(key_func=get_remote_address)
