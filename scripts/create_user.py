#!/usr/bin/env python3
"""
用户创建工具

用法:
    python create_user.py <username> --email <email> --password <password>
"""

import argparse
import os
import sys

# 添加项目根目录到Python路径
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from chatrelay.models.user import UserAlreadyExistsError, create_user, get_user_by_username
from chatrelay.utils.auth import create_access_token, hash_password, verify_password


def parse_args():
    """解析命令行参数"""
    parser = argparse.ArgumentParser(description="创建用户并签发访问令牌")
    parser.add_argument("username", help="用户名")
    parser.add_argument("--email", required=True, help="邮箱")
    parser.add_argument("--password", required=True, help="密码")
    parser.add_argument("--display-name", default=None, help="显示名称")
    parser.add_argument(
        "--existing-ok",
        action="store_true",
        help="用户已存在时只签发令牌 (需密码匹配)",
    )

    return parser.parse_args()


def main():
    """主函数"""
    args = parse_args()

    try:
        user = create_user(
            username=args.username,
            email=args.email,
            hashed_password=hash_password(args.password),
            display_name=args.display_name,
        )
        print(f"\n已创建用户: {user.username} <{user.email}>")
    except UserAlreadyExistsError as e:
        user = get_user_by_username(args.username)
        if not args.existing_ok or user is None or not verify_password(
            args.password, user.hashed_password
        ):
            print(f"创建失败: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"\n用户已存在: {user.username}")

    print("\n访问令牌:")
    print(f"{create_access_token(user.username)}\n")


if __name__ == "__main__":
    main()
