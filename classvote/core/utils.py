"""General utility functions."""
import secrets
import string
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from classvote.core.constants import ID_LENGTH

ID_ALPHABET = string.ascii_letters + string.digits


def generate_id(length: int = ID_LENGTH) -> str:
    """Generate a random alphanumeric document identifier."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_timezone(dt: datetime, tz: ZoneInfo) -> datetime:
    """Convert datetime to specified timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def isoformat(dt: Optional[datetime], tz: ZoneInfo) -> Optional[str]:
    """ISO 8601 string in the display timezone, or None."""
    if dt is None:
        return None
    return to_timezone(dt, tz).isoformat()


def date_master_key(tz: ZoneInfo, now: Optional[datetime] = None) -> str:
    """
    Today's date as YYYYMMDD in the given timezone.

    Args:
        tz: Timezone the date is taken in
        now: Reference time (defaults to the current time)
    """
    now = now or utcnow()
    return to_timezone(now, tz).strftime("%Y%m%d")
