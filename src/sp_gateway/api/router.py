"""User API router: signup, login, whoami.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.sp_common.response import ApiResponse, success_response
from src.sp_gateway.auth.dependencies import get_current_username
from src.sp_gateway.user.schemas import (
    LoginResponse,
    RegisterResponse,
    UserCredentials,
    WhoAmIResponse,
)
from src.sp_gateway.user.service import UserService
from src.sp_ledger.api.dependencies import get_request_id

router = APIRouter(prefix="/users", tags=["User Management"])


def get_user_service(request: Request) -> UserService:
    return request.app.state.users


Users = Annotated[UserService, Depends(get_user_service)]
RequestId = Annotated[str, Depends(get_request_id)]


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User signup",
)
async def signup(body: UserCredentials, users: Users, request_id: RequestId) -> ApiResponse:
    user = await users.register(body.username, body.password)

    data = RegisterResponse(
        username=user.username,
        created_at=user.created_at.isoformat() if user.created_at else "",
    )
    return success_response(
        data.model_dump(), message="User signed up successfully", request_id=request_id
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(body: UserCredentials, users: Users, request_id: RequestId) -> ApiResponse:
    access_token = await users.login(body.username, body.password)

    data = LoginResponse(
        access_token=access_token,
        token_type="Bearer",
        expires_in=users.tokens.expires_in,
    )
    return success_response(data.model_dump(), message="Login successful", request_id=request_id)


@router.get("/whoami", response_model=ApiResponse, summary="Current user")
async def whoami(
    username: Annotated[str, Depends(get_current_username)], request_id: RequestId
) -> ApiResponse:
    return success_response(WhoAmIResponse(username=username).model_dump(), request_id=request_id)
