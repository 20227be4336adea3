"""
RoomForge - Authentication Router
JWT authentication endpoints and per-user metadata
"""
from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, ConfigDict, Field
import logging

from roomforge.database import get_db
from roomforge.models.user import User, UserRole
from roomforge.schemas.element import AvatarUpdate, UserAvatarInfo
from roomforge.services import catalog
from roomforge.services.auth import (
    AuthService,
    get_current_user_required,
    ACCESS_TOKEN_EXPIRE_MINUTES
)
from roomforge.services.store import UnitOfWork, get_uow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["authentication"])


# ============================================================
# Schemas
# ============================================================

class UserResponse(BaseModel):
    """User response without sensitive data."""
    id: int
    username: str
    role: str
    avatar_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class UserCreate(BaseModel):
    """Schema for signing up."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.USER
    avatar_id: Optional[int] = None


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        role=user.role.value,
        avatar_id=user.avatar_id
    )


# ============================================================
# Authentication Endpoints
# ============================================================

@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    uow: UnitOfWork = Depends(get_uow)
):
    """Create an account."""
    if await uow.users.get_by_username(user_data.username):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already exists"
        )

    if user_data.avatar_id is not None and not await uow.avatars.get(user_data.avatar_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Avatar {user_data.avatar_id} not found"
        )

    user = await AuthService.create_user(
        uow.session,
        username=user_data.username,
        password=user_data.password,
        role=user_data.role,
        avatar_id=user_data.avatar_id
    )
    return user_response(user)


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """
    Authenticate user and return JWT token.

    Use form data with 'username' and 'password' fields.
    """
    user = await AuthService.authenticate_user(
        db, form_data.username, form_data.password
    )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = AuthService.create_access_token(
        data={"sub": str(user.id), "role": user.role.value}
    )

    return Token(
        access_token=access_token,
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=user_response(user)
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get the authenticated user."""
    return user_response(current_user)


# ============================================================
# User Metadata
# ============================================================

@router.put("/me/avatar")
async def update_my_avatar(
    data: AvatarUpdate,
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Choose an avatar."""
    await catalog.update_user_avatar(uow, current_user.id, data.avatar_id)
    return {"message": "Metadata updated"}


@router.get("/metadata/bulk", response_model=List[UserAvatarInfo])
async def get_bulk_metadata(
    ids: str = Query(..., description="Comma-separated user ids"),
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_user_required)
):
    """Avatar images of several users at once."""
    try:
        user_ids = [int(part) for part in ids.split(",") if part.strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ids must be a comma-separated list of integers"
        )

    users = await catalog.get_bulk_avatars(uow, user_ids)
    return [
        UserAvatarInfo(
            user_id=u.id,
            avatar_url=u.avatar.image_url if u.avatar else None
        )
        for u in users
    ]
