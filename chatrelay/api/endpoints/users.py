"""User listing endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from chatrelay.models.user import User, UserPublic, get_all_users, get_user_by_username
from chatrelay.utils.auth import get_current_active_user

router = APIRouter()


@router.get("/", response_model=List[UserPublic])
def get_users(current_user: User = Depends(get_current_active_user)):
    """Get all users."""
    return [user.to_public() for user in get_all_users()]


@router.get("/{username}", response_model=UserPublic)
def get_user(username: str, current_user: User = Depends(get_current_active_user)):
    """Get a specific user by username."""
    user = get_user_by_username(username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {username} not found",
        )
    return user.to_public()
