"""
Auth Controllers (API Routes)
=============================

FastAPI routes for signup, login and profile.

Controllers are thin - they delegate to the AuthService.
"""

from fastapi import APIRouter, Depends, status

from helpdesk.auth.application import (
    AuthService,
    SignupRequest,
    LoginRequest,
    UserInfo,
    AuthData,
    ProfileData,
)
from helpdesk.auth.domain import Principal, User
from helpdesk.auth.interfaces.dependencies import get_auth_service, get_current_principal
from helpdesk.shared.api import ApiResponse

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _user_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


@router.post(
    "/signup",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        400: {"description": "Validation errors"},
        409: {"description": "User already exists with this email"},
    }
)
async def signup(
    payload: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    token, user = await service.signup(
        payload.name, payload.email, payload.password, payload.role
    )
    return ApiResponse(
        success=True,
        message="User created successfully",
        data=AuthData(token=token, user=_user_info(user)),
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthData],
    summary="Exchange email and password for a bearer token",
    responses={401: {"description": "Invalid email or password"}}
)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    token, user = await service.login(payload.email, payload.password)
    return ApiResponse(
        success=True,
        message="Login successful",
        data=AuthData(token=token, user=_user_info(user)),
    )


@router.get(
    "/profile",
    response_model=ApiResponse[ProfileData],
    summary="Profile of the authenticated user"
)
async def profile(
    principal: Principal = Depends(get_current_principal),
    service: AuthService = Depends(get_auth_service)
):
    user = await service.profile(principal)
    return ApiResponse(success=True, data=ProfileData(user=_user_info(user)))
