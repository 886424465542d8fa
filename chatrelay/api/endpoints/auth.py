"""Authentication API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from chatrelay.models.user import (
    User,
    UserAlreadyExistsError,
    UserPublic,
    create_user,
)
from chatrelay.utils.auth import (
    authenticate_user,
    create_access_token,
    get_current_active_user,
    hash_password,
)
from chatrelay.utils.log import get_logger

logger = get_logger(__name__)


class UserCreate(BaseModel):
    """Registration payload."""

    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    display_name: Optional[str] = None


class UserLogin(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


router = APIRouter()


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate):
    """Register a new user."""
    try:
        created = create_user(
            username=user.username,
            email=user.email,
            hashed_password=hash_password(user.password),
            display_name=user.display_name,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return created.to_public()


@router.post("/token", response_model=Token)
def login(credentials: UserLogin):
    """Exchange username and password for an access token."""
    user = authenticate_user(credentials.username, credentials.password)
    if user is None:
        logger.warning(f"Failed login for {credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token(user.username))


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_active_user)):
    """Return the authenticated user."""
    return current_user.to_public()


@router.get("/verify")
def verify_token(current_user: User = Depends(get_current_active_user)):
    """验证token是否有效"""
    return {
        "status": "success",
        "message": "Token is valid",
        "user": {
            "username": current_user.username,
        },
    }
