"""Rate limiting configuration."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from classvote.core.config import settings


def get_client_ip(request):
    """Client IP for rate limiting; behind a proxy, the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window"
)

# A whole class usually shares one school NAT address, so the student-facing
# limits are sized for ~40 students submitting at once.
RATE_LIMITS = {
    "submit": "120/minute",
    "reset_request": "60/minute",
    "create_vote": "30/minute",
    "admin_login": "20/minute",
    "summarize": "10/minute",
}
