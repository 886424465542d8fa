"""Authentication utilities for chatrelay."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from chatrelay.config import get_settings
from chatrelay.models.user import User, get_user_by_username

# 配置认证头
api_key_header = APIKeyHeader(
    name="Authorization", scheme_name="Bearer", auto_error=False
)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class TokenData(BaseModel):
    """Token数据模型"""

    username: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    """签发带过期时间的 JWT"""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    data = {
        "sub": username,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(data, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[TokenData]:
    """解析 JWT; 无效或过期时返回 None"""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    username = payload.get("sub")
    if not username:
        return None
    return TokenData(username=username)


def authenticate_user(username: str, password: str) -> Optional[User]:
    """校验用户名和密码"""
    user = get_user_by_username(username)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def get_current_user(api_key: Optional[str] = Depends(api_key_header)) -> User:
    """验证 Bearer token 并返回用户"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not api_key:
        raise credentials_exception

    # 移除Bearer前缀(如果有)
    if api_key.startswith("Bearer "):
        api_key = api_key[7:]

    token_data = decode_access_token(api_key)
    if token_data is None:
        raise credentials_exception

    user = get_user_by_username(token_data.username)
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """获取当前活跃用户"""
    return current_user
