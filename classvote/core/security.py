"""Admin code hashing, the date master key and vote-scoped admin tokens."""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo
import argon2
import jwt
from fastapi import HTTPException, Request

from classvote.core import config
from classvote.core.utils import date_master_key

ADMIN_COOKIE_NAME = "admin_token"

# Argon2 hasher for per-vote admin codes
ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


def get_password_hash(password: str) -> str:
    """Hash an admin code using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify an admin code against its Argon2 hash."""
    try:
        ph.verify(password_hash, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def verify_vote_admin_password(
    password: str,
    password_hash: str,
    tz: Optional[ZoneInfo] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Check an admin code for one vote.

    Accepts the vote's own code, or (when MASTER_KEY_ENABLED) today's date as
    YYYYMMDD in the configured timezone.
    """
    if config.settings.MASTER_KEY_ENABLED:
        tz = tz or ZoneInfo(config.settings.TIMEZONE)
        if hmac.compare_digest(password, date_master_key(tz, now)):
            return True

    return verify_password(password, password_hash)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign ``data`` as a JWT that expires after ``expires_delta``."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)
    return encoded_jwt


def create_vote_admin_token(vote_id: str) -> str:
    """Create an admin token scoped to a single vote."""
    return create_access_token(data={"is_admin": True, "vote_id": vote_id})


def decode_admin_token(request: Request) -> dict:
    """Decode the admin JWT from the cookie and return its payload."""
    token = request.cookies.get(ADMIN_COOKIE_NAME)

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if not payload.get("is_admin"):
        raise HTTPException(status_code=403, detail="Not authorized")
    return payload


def verify_vote_admin_token(vote_id: str, request: Request) -> dict:
    """Verify the admin cookie grants access to ``vote_id``.

    Used as a FastAPI dependency on routes with a ``vote_id`` path parameter.
    """
    payload = decode_admin_token(request)
    if payload.get("vote_id") != vote_id:
        raise HTTPException(status_code=403, detail="Not authorized for this vote")
    return payload
