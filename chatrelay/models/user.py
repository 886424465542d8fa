"""User records and their YAML-backed store."""

import os
import threading
import yaml
from typing import Dict, List, Optional

from pydantic import BaseModel

from chatrelay.config import get_settings
from chatrelay.utils.log import get_logger

logger = get_logger(__name__)

# 单进程内串行化读-改-写
_store_lock = threading.Lock()


class UserPublic(BaseModel):
    """用户的公开信息"""

    username: str
    email: str
    display_name: Optional[str] = None


class User(UserPublic):
    """存储中的用户记录"""

    hashed_password: str

    def to_public(self) -> UserPublic:
        return UserPublic(**self.model_dump(exclude={"hashed_password"}))


class UserAlreadyExistsError(Exception):
    """Raised when a username or email is already registered."""

    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{field.capitalize()} {value} already exists")


def _user_file() -> str:
    settings = get_settings()
    os.makedirs(settings.user_storage_path, exist_ok=True)
    return settings.user_file


def load_users() -> Dict[str, User]:
    """从文件加载用户信息"""
    user_file = _user_file()
    if not os.path.exists(user_file):
        return {}

    with open(user_file, "r", encoding="utf-8") as f:
        user_data = yaml.safe_load(f) or {}
    return {username: User(**data) for username, data in user_data.items()}


def _write_users(users: Dict[str, User]) -> None:
    user_dict = {username: user.model_dump() for username, user in users.items()}
    with open(_user_file(), "w", encoding="utf-8") as f:
        yaml.safe_dump(user_dict, f, allow_unicode=True)


def get_user_by_username(username: str) -> Optional[User]:
    """通过用户名获取用户"""
    return load_users().get(username)


def get_user_by_email(email: str) -> Optional[User]:
    """通过邮箱获取用户"""
    email = email.lower()
    for user in load_users().values():
        if user.email.lower() == email:
            return user
    return None


def create_user(
    username: str,
    email: str,
    hashed_password: str,
    display_name: Optional[str] = None,
) -> User:
    """创建新用户; username 和 email 都必须唯一"""
    with _store_lock:
        users = load_users()
        if username in users:
            raise UserAlreadyExistsError("username", username)
        if any(u.email.lower() == email.lower() for u in users.values()):
            raise UserAlreadyExistsError("email", email)

        user = User(
            username=username,
            email=email,
            display_name=display_name or username,
            hashed_password=hashed_password,
        )
        users[username] = user
        _write_users(users)

    logger.info(f"Created user {username}")
    return user


def get_all_users() -> List[User]:
    """获取所有用户"""
    return list(load_users().values())


def user_exists(username: str) -> bool:
    """检查用户是否存在"""
    return get_user_by_username(username) is not None
