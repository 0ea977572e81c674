"""Rate limiting via slowapi.

One module-level ``Limiter`` shared by the routers and attached to the app
in ``hrms.main``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# 60 requests/minute per client IP unless a route sets its own limit
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["60/minute"],
)

# Tighter limit for routes that mutate balances or send mail
WRITE_LIMIT = "20/minute"
