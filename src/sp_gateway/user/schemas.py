"""Pydantic request/response schemas for sp_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field

from src.sp_common.validation import USERNAME_PATTERN


class UserCredentials(BaseModel):
    username: str = Field(..., min_length=4, max_length=16, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=8, max_length=100)


class RegisterResponse(BaseModel):
    username: str
    created_at: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class WhoAmIResponse(BaseModel):
    username: str
