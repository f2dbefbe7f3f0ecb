"""Shared response bodies."""
from pydantic import BaseModel
from typing import Optional


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    code: str
    message: str
    operation: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body of 500/502 responses raised outside the request validation path."""
    success: bool = False
    error: ErrorDetail
