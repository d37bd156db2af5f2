"""
Users API router.
Handles the admins and workers who log in and get scheduled.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.database import get_db
from dispatch.exceptions import NotFoundError, ValidationError
from dispatch.middleware.auth import SessionUser, get_current_user, require_admin
from dispatch.models.user import User
from dispatch.schemas.user import UserCreate, UserResponse, UserUpdate
from dispatch.services.response_builders import build_user_response

router = APIRouter()


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", user_id)
    return user


@router.get("/users", response_model=List[UserResponse])
async def get_users(
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    """
    Get all users ordered by name.

    Available to every logged-in user; the calendar needs worker names.
    """
    result = await db.execute(select(User).order_by(User.full_name, User.id))
    return [build_user_response(u) for u in result.scalars().all()]


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    """Get a specific user by ID."""
    user = await get_user_or_404(db, user_id)
    return build_user_response(user)


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Create a new user.

    Requires admin authentication.
    """
    existing = await db.execute(select(User).where(User.username == data.username))
    if existing.scalar_one_or_none():
        raise ValidationError("A user with this username already exists")

    user = User(
        username=data.username,
        password=data.password,
        full_name=data.full_name,
        role=data.role,
        avatar_url=data.avatar_url,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    return build_user_response(user)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Update a user.

    Requires admin authentication.
    """
    user = await get_user_or_404(db, user_id)

    # Prevent admin from demoting themselves
    if user.id == admin.id and data.role and data.role != "admin":
        raise ValidationError("Cannot change your own admin role")

    if data.full_name is not None:
        user.full_name = data.full_name
    if data.password is not None:
        user.password = data.password
    if data.role is not None:
        user.role = data.role
    if data.avatar_url is not None:
        user.avatar_url = data.avatar_url

    await db.commit()
    await db.refresh(user)

    return build_user_response(user)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Delete a user and their absences.

    Requires admin authentication.
    """
    if user_id == admin.id:
        raise ValidationError("Cannot delete your own account")

    user = await get_user_or_404(db, user_id)

    await db.delete(user)
    await db.commit()

    return {"success": True}
