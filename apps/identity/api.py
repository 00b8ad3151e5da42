"""
Identity API endpoints with JWT authentication.

Provides registration, login, logout, token refresh and the current-user
profile. Tokens live in httpOnly cookies; a Django session login (admin
site, test client) is accepted as well.
"""
import os
from typing import Optional
from ninja import Router, Schema
from django.conf import settings
from django.http import HttpRequest, HttpResponse
from ninja.errors import HttpError
from django.contrib.auth import authenticate

from .models import User
from .dtos import UserCreate, UserOut
from .services import get_user_dto, create_user
from .jwt_auth import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    create_token_pair,
    create_access_token,
    get_user_id_from_token,
    get_access_token_cookie_settings,
    get_refresh_token_cookie_settings,
)

router = Router(tags=["Identity"])


# =============================================================================
# Schemas
# =============================================================================

class LoginSchema(Schema):
    username: str
    password: str


class TokenResponse(Schema):
    success: bool
    user: Optional[UserOut] = None
    message: Optional[str] = None


# =============================================================================
# Helper Functions
# =============================================================================

def get_current_user(request: HttpRequest) -> Optional[User]:
    """
    Resolve the caller from the access token cookie, falling back to the
    session-authenticated user.
    """
    access_token = request.COOKIES.get(ACCESS_COOKIE)
    if access_token:
        user_id = get_user_id_from_token(access_token)
        if user_id:
            user = User.objects.filter(id=user_id, is_active=True).first()
            if user:
                return user

    session_user = getattr(request, 'user', None)
    if session_user is not None and session_user.is_authenticated and session_user.is_active:
        return session_user
    return None


def require_auth(request: HttpRequest) -> User:
    """
    Require authentication. Raises 401 if not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HttpError(401, "Not authenticated")
    return user


def is_production() -> bool:
    """Check if running in production (Lambda or DEBUG=False)."""
    return bool(os.getenv('AWS_LAMBDA_FUNCTION_NAME')) or not settings.DEBUG


def _token_response(user: User, status: int = 200) -> HttpResponse:
    """Build a JSON response carrying the user and fresh auth cookies."""
    access_token, refresh_token = create_token_pair(user.id)
    user_dto = get_user_dto(user.id)

    response = HttpResponse(
        TokenResponse(success=True, user=UserOut(**user_dto.__dict__)).model_dump_json(),
        content_type='application/json',
        status=status,
    )

    prod = is_production()
    response.set_cookie(ACCESS_COOKIE, access_token, **get_access_token_cookie_settings(prod))
    response.set_cookie(REFRESH_COOKIE, refresh_token, **get_refresh_token_cookie_settings(prod))
    return response


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response={201: TokenResponse}, auth=None)
def register_user(request: HttpRequest, payload: UserCreate):
    """
    **Public Endpoint**: create an account and sign it in.
    """
    user_dto = create_user(payload)
    user = User.objects.get(id=user_dto.id)
    return _token_response(user, status=201)


@router.post("/login", response=TokenResponse, auth=None)
def login_user(request: HttpRequest, payload: LoginSchema):
    """
    Authenticate user and set JWT tokens in httpOnly cookies.
    """
    user = authenticate(request, username=payload.username, password=payload.password)

    if user is None:
        raise HttpError(401, "Invalid username or password")

    if not user.is_active:
        raise HttpError(401, "Account is disabled")

    return _token_response(user)


@router.post("/logout", response=TokenResponse, auth=None)
def logout_user(request: HttpRequest):
    """
    Clear authentication cookies.
    """
    response = HttpResponse(
        TokenResponse(success=True, message="Logged out").model_dump_json(),
        content_type='application/json'
    )
    response.delete_cookie(ACCESS_COOKIE, path='/')
    response.delete_cookie(REFRESH_COOKIE, path='/')
    return response


@router.post("/refresh", response=TokenResponse, auth=None)
def refresh_token(request: HttpRequest):
    """
    Mint a new access token from the refresh token cookie.
    """
    refresh_token_value = request.COOKIES.get(REFRESH_COOKIE)
    if not refresh_token_value:
        raise HttpError(401, "No refresh token")

    user_id = get_user_id_from_token(refresh_token_value, token_type='refresh')
    if not user_id:
        raise HttpError(401, "Invalid refresh token")

    user = User.objects.filter(id=user_id, is_active=True).first()
    if not user:
        raise HttpError(401, "Invalid refresh token")

    user_dto = get_user_dto(user.id)
    response = HttpResponse(
        TokenResponse(success=True, user=UserOut(**user_dto.__dict__)).model_dump_json(),
        content_type='application/json'
    )
    response.set_cookie(
        ACCESS_COOKIE,
        create_access_token(user.id),
        **get_access_token_cookie_settings(is_production()),
    )
    return response


@router.get("/me", response=UserOut, auth=None)
def get_me(request: HttpRequest):
    """
    Get current authenticated user's profile.
    """
    user = require_auth(request)
    user_dto = get_user_dto(user.id)
    if not user_dto:
        raise HttpError(404, "User not found")
    return user_dto
