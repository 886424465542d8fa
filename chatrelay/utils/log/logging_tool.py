import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "chatrelay"


class RichLoggerConfig:
    """
    Process-wide configuration for rich logging.

    All loggers handed out by :func:`get_logger` live under the ``chatrelay``
    namespace, so configuring the namespace root once is enough for the whole
    service, including uvicorn reloads.
    """

    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(RichLoggerConfig, cls).__new__(cls)
            cls._instance.__initialized = False
        return cls._instance

    def __init__(self, level: str = "INFO", log_file: str = None):
        if self.__initialized:
            return
        self.__initialized = True

        self.level = level
        self.log_file = log_file
        self.console = None
        self.logger = None
        self.rich_handler = None
        self.file_handler = None
        self.configure(level=level, log_file=log_file)

    def configure(
        self,
        level: str = "INFO",
        log_file: Optional[str] = None,
        enable_output: bool = True,
        enable_file: bool = False,
    ) -> None:
        """Configure logging handlers and formatters."""

        self.reset_logger()

        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        self.level = level
        if log_file is not None:
            self.log_file = log_file

        self.console = Console()

        rich_format_pattern = "%(message)s"
        log_format_pattern = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

        self.logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.logger.setLevel(self.level)
        # 清除所有现有的 handlers，避免重复输出
        self.logger.handlers.clear()
        self.logger.propagate = False

        if enable_output:
            self.rich_handler = RichHandler(
                console=self.console,
                show_time=False,
                rich_tracebacks=True,
                # 日志里会带用户名和客户端数据, 不解析 markup
                markup=False,
            )
            self.rich_handler.setLevel(self.level)
            self.rich_handler.setFormatter(
                logging.Formatter(fmt=rich_format_pattern, datefmt="[%X]")
            )
            self.logger.addHandler(self.rich_handler)

        if self.log_file and enable_file:
            self.file_handler = logging.FileHandler(
                self.log_file, mode="a", encoding="utf-8"
            )
            self.file_handler.setLevel(self.level)
            self.file_handler.setFormatter(
                logging.Formatter(fmt=log_format_pattern, datefmt="%Y-%m-%d %H:%M:%S")
            )
            self.logger.addHandler(self.file_handler)

    def reset_logger(self) -> None:
        """Reset the logger to its initial state."""
        if self.logger is not None:
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        self.console = None
        self.rich_handler = None
        self.file_handler = None

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get a logger below the configured namespace root."""
        if self.logger is None:
            raise ValueError("Logger has not been configured yet.")
        if not name or name == ROOT_LOGGER_NAME:
            return self.logger
        if not name.startswith(f"{ROOT_LOGGER_NAME}."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)


rich_logger = RichLoggerConfig()


def configure(
    level: str = "INFO",
    log_file: str = None,
    enable_output: bool = True,
    enable_file: bool = False,
) -> None:
    """Configure rich logging with the specified settings."""
    rich_logger.configure(
        level=level,
        log_file=log_file,
        enable_output=enable_output,
        enable_file=enable_file,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    获取日志记录器的便捷方法

    参数:
        name: 日志记录器名称

    返回:
        logging.Logger: 日志记录器
    """
    return rich_logger.get_logger(name)
