"""
Rate limiting configuration using slowapi.

Two tiers:
  • strict  – 5/min  (court name discovery – fans out to every club)
  • default – 60/min (everything else)

The limiter keys on client IP by default.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Named rate strings for use in @limiter.limit() decorators
STRICT = "5/minute"     # court discovery report
DEFAULT = "60/minute"   # slot / club / proxy endpoints

limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT])
