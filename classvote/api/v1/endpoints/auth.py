"""Authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from classvote.api.deps import get_db, TIMEZONE
from classvote.schemas import AdminLoginRequest, SuccessResponse
from classvote.core.security import (
    ADMIN_COOKIE_NAME,
    create_vote_admin_token,
    verify_vote_admin_password,
)
from classvote.core.rate_limit import limiter, RATE_LIMITS
from classvote.core import config
from classvote.services.vote import get_vote

router = APIRouter()


@router.post("/votes/{vote_id}/admin/login", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["admin_login"])
async def admin_login(
    request: Request,
    vote_id: str,
    login: AdminLoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """
    Unlock the admin panel of one vote.

    Accepts the vote's 4-digit admin code, or today's date as YYYYMMDD when
    the master key is enabled. On success a JWT scoped to this vote is set
    in an httpOnly cookie; logging in to another vote replaces it.

    Example:
        Request:
            POST /api/v1/votes/Xk2.../admin/login
            {"password": "1234"}

        Response (200):
            {"success": true, "message": "Logged in successfully"}
            Set-Cookie: admin_token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {"detail": "Invalid password"}
    """
    vote = get_vote(db, vote_id)
    if not vote:
        raise HTTPException(status_code=404, detail="Vote not found")

    if not verify_vote_admin_password(login.password, vote.admin_password_hash, tz=TIMEZONE):
        raise HTTPException(status_code=401, detail="Invalid password")

    response.set_cookie(
        key=ADMIN_COOKIE_NAME,
        value=create_vote_admin_token(vote_id),
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    return SuccessResponse(success=True, message="Logged in successfully")


@router.post("/auth/logout", response_model=SuccessResponse)
async def admin_logout(response: Response) -> SuccessResponse:
    """Clear the admin cookie. Works whether or not anyone is logged in."""
    response.delete_cookie(key=ADMIN_COOKIE_NAME)
    return SuccessResponse(success=True, message="Logged out successfully")
