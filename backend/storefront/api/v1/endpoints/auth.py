"""
Authentication API Endpoints.

Registration, login and token introspection.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.v1.serializers import user_to_dict
from storefront.core.database import get_db
from storefront.core.exceptions import AuthenticationError
from storefront.core.schemas import CamelModel
from storefront.core.security import create_access_token, decode_access_token
from storefront.models.user import User
from storefront.modules.accounts.service import UserService

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


# ==================== Schemas ====================


class RegisterRequest(CamelModel):
    """Create account."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str | None = None


class LoginRequest(CamelModel):
    """Password login."""

    username: str
    password: str


# ==================== Dependencies ====================


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the user from a bearer access token."""
    if credentials is None:
        raise AuthenticationError("Missing access token")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Invalid access token")

    user = await UserService(db).find_by_id(user_id)
    if not user:
        raise AuthenticationError("Invalid access token")
    return user


# ==================== Endpoints ====================


@router.post("/register")
async def register_user(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Register a customer account."""
    users = UserService(db)
    user = await users.register_user(
        username=request.username,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
    )
    return {"message": "User registered successfully!", "id": user.id}


@router.post("/register/admin")
async def register_admin(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Register an admin account."""
    users = UserService(db)
    user = await users.register_user(
        username=request.username,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        is_admin=True,
    )
    return {"message": "Admin registered successfully!", "id": user.id}


@router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Log in with username and password.

    Returns an access token together with the user profile.
    """
    users = UserService(db)
    user = await users.authenticate(request.username, request.password)

    return {
        "token": create_access_token(user.id, user.username),
        **user_to_dict(user),
    }


@router.get("/me")
async def get_me(user: User = Depends(get_current_user)) -> dict[str, Any]:
    """Get the profile of the token's owner."""
    return user_to_dict(user)
