"""
socialite.logger

    from socialite.logger import init_logger, logger

    init_logger(level="DEBUG", log_format="json")   # 可选，通常由应用入口调用
    logger.info("Token exchanged")

作为库被引用时不需要调用 init_logger()：此时 logger 直接转发到 loguru 的默认 logger，
由宿主应用决定 sink 配置。
"""
from datetime import UTC, time, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

import loguru

from socialite.logger.handler import LogFormat, LoggerHandler, RetentionType, RotationType

if TYPE_CHECKING:
    from loguru import Logger

_logger_manager: LoggerHandler | None = None
_logger: "Logger | None" = None


class _LoggerProxy:
    """模块级 logger 对象，每次属性访问时解析到当前生效的 loguru logger"""

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(_logger if _logger is not None else loguru.logger, name)

    def __repr__(self) -> str:
        state = "initialized" if _logger is not None else "loguru default"
        return f"<socialite logger ({state})>"


def init_logger(
    *,
    level: str = "INFO",
    base_log_dir: Path | None = None,
    rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
    retention: RetentionType = timedelta(days=30),
    compression: str | None = None,
    use_utc: bool = True,
    enqueue: bool = False,
    log_format: LogFormat | str = LogFormat.TEXT,
    write_to_file: bool = False,
    write_to_console: bool = True,
) -> "Logger":
    """按参数创建 LoggerHandler 并挂载 sink，参数含义见 LoggerHandler"""
    global _logger_manager, _logger

    _logger_manager = LoggerHandler(
        level=level,
        base_log_dir=base_log_dir,
        rotation=rotation,
        retention=retention,
        compression=compression,
        use_utc=use_utc,
        enqueue=enqueue,
        log_format=log_format,
    )
    _logger = _logger_manager.setup(write_to_file=write_to_file, write_to_console=write_to_console)
    return _logger


def get_logger_manager() -> LoggerHandler:
    if _logger_manager is None:
        raise RuntimeError("LoggerHandler not initialized. Call init_logger() first.")
    return _logger_manager


logger: "Logger" = _LoggerProxy()  # type: ignore[assignment]

__all__ = [
    "LogFormat",
    "LoggerHandler",
    "RetentionType",
    "RotationType",
    "get_logger_manager",
    "init_logger",
    "logger",
]
