"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Rate limiter instance - uses client IP as key
# Imported by routers and main without circular imports
limiter = Limiter(key_func=get_remote_address)
