"""Main API router for v1."""
from fastapi import APIRouter

from classvote.api.v1.endpoints import auth, votes, submissions, admin, sse

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(votes.router, prefix="/votes", tags=["Votes"])
api_router.include_router(submissions.router, prefix="/votes", tags=["Submissions"])
api_router.include_router(admin.router, prefix="/votes/{vote_id}/admin", tags=["Admin"])
api_router.include_router(sse.router, tags=["SSE"])
