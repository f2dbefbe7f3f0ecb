"""Authentication schemas."""
from pydantic import BaseModel, Field, field_validator

from classvote.core.sanitization import validate_admin_login_code


class AdminLoginRequest(BaseModel):
    password: str = Field(..., min_length=1, max_length=8)

    @field_validator('password')
    @classmethod
    def validate_password_field(cls, v: str) -> str:
        """Four digits (vote code) or eight digits (YYYYMMDD master key)."""
        return validate_admin_login_code(v)
