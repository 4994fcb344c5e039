"""Authentication endpoints - registration with admin approval."""

from fastapi import APIRouter, HTTPException, status
from starlette.requests import Request

from src.movieclub.api.dependencies import (
    AuthServiceDep,
    CurrentUser,
    RegistrationServiceDep,
)
from src.movieclub.core.exceptions import ConflictError
from src.movieclub.core.rate_limit import limiter
from src.movieclub.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.movieclub.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

_USER_EXAMPLE = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "username": "cinephile",
    "email": "user@example.com",
    "role": "user",
    "status": "pending",
    "created_at": "2024-01-15T10:30:00",
}


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "Account created",
            "content": {
                "application/json": {
                    "example": {
                        "user": _USER_EXAMPLE,
                        "message": "Registration received, awaiting administrator approval",
                    }
                }
            },
        },
        400: {"description": "Validation error (weak password, bad email, ...)"},
        409: {"description": "Email or username already in use"},
    },
)
@limiter.limit("3/hour")
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: RegistrationServiceDep,
) -> RegisterResponse:
    """Create an account.

    The first account ever created becomes an active administrator. Every
    later account is pending until an administrator approves it.
    """
    try:
        user = await service.register(
            username=register_data.username,
            email=register_data.email,
            password=register_data.password,
        )
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    message = (
        "Administrator account created"
        if user.is_admin
        else "Registration received, awaiting administrator approval"
    )
    return RegisterResponse(user=UserRead.model_validate(user), message=message)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                        "user": {**_USER_EXAMPLE, "status": "active"},
                    }
                }
            },
        },
        401: {"description": "Invalid email or password"},
        403: {"description": "Account pending approval or inactive (see `code`)"},
    },
)
@limiter.limit("5/minute")
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate and return a bearer token valid for several days."""
    result = await service.authenticate(login_data.email, login_data.password)

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return result


@router.get(
    "/me",
    response_model=UserRead,
    responses={
        200: {
            "description": "Current user profile",
            "content": {"application/json": {"example": {**_USER_EXAMPLE, "status": "active"}}},
        },
        401: {"description": "Not authenticated"},
    },
)
async def me(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user."""
    return UserRead.model_validate(current_user)
