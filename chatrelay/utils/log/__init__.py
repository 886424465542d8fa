from .logging_tool import (
    configure,
    get_logger,
)

__all__ = [
    # 日志工具
    "configure",
    "get_logger",
]
