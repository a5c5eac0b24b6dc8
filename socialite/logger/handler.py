import sys
from datetime import UTC, time, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Any, TypeAlias

import loguru

from socialite.toolkit import context
from socialite.toolkit.json import orjson_dumps

RotationType: TypeAlias = str | int | time | timedelta
RetentionType: TypeAlias = str | int | timedelta

_DEFAULT_LOG_DIR = Path("/tmp/socialite_logs")

# 文本格式的公共前缀，trace_id 由格式化器在运行时填入
_TEXT_LAYOUT = "{time:YYYY-MM-DD HH:mm:ss.SSSZ} | {level: <8} | {name}:{function}:{line} | %s - {message}"
_CONSOLE_LAYOUT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSSZ}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <magenta>%s</magenta> - <level>{message}</level>"
)

# 仅供格式化器内部使用的 extra 键，不输出到 JSON
_INTERNAL_EXTRA = frozenset({"trace_id", "json_content", "_rendered"})


class LogFormat(StrEnum):
    JSON = "json"
    TEXT = "text"


def _trace_id(record: dict[str, Any]) -> str:
    # logger.bind(trace_id=...) 优先，其次取当前调用链上下文
    return record["extra"].get("trace_id") or context.get_trace_id()


def _iso_utc(record: dict[str, Any]) -> str:
    return record["time"].astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _escape(text: str) -> str:
    # 直接拼进格式串的值需要转义花括号
    return text.replace("{", "{{").replace("}", "}}")


class LoggerHandler:
    """
    loguru 的 sink 配置：控制台与按天滚动的文件，文本或 JSON Lines 两种格式。

    实例化只保存参数，setup() 时才清空已有 sink 并挂载新的输出。
    """

    LOG_NAMESPACE = "socialite"

    def __init__(
        self,
        *,
        level: str = "INFO",
        base_log_dir: Path | None = None,
        rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
        retention: RetentionType = timedelta(days=30),
        compression: str | None = None,
        use_utc: bool = True,
        enqueue: bool = False,
        log_format: LogFormat | str = LogFormat.TEXT,
    ):
        """
        :param level: 最低输出等级
        :param base_log_dir: 日志文件目录，文件名为 YYYY-MM-DD.log
        :param rotation: 文件轮转条件，默认每天 UTC 零点
        :param retention: 旧文件保留时长
        :param compression: 轮转后的压缩格式，如 "zip"
        :param use_utc: 日志时间是否统一为 UTC
        :param enqueue: 是否经由队列写入（多进程安全）
        :param log_format: text 或 json
        """
        self._logger = loguru.logger
        self._is_initialized = False

        self.level = level
        self.base_log_dir = base_log_dir or _DEFAULT_LOG_DIR
        self.retention = retention
        self.compression = compression
        self.use_utc = use_utc
        self.enqueue = enqueue
        self.log_format = LogFormat(log_format)
        self.colorize = self.log_format == LogFormat.TEXT

        if use_utc and isinstance(rotation, time) and rotation.tzinfo is None:
            rotation = rotation.replace(tzinfo=UTC)
        self.rotation = rotation

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def setup(self, *, write_to_file: bool = False, write_to_console: bool = True) -> "loguru.Logger":
        self._logger.remove()
        # configure(patcher=None) 不会清除旧的 patcher，本地时间模式下显式换成空操作
        self._logger.configure(
            extra={"trace_id": None, "log_namespace": self.LOG_NAMESPACE, "json_content": None},
            patcher=self._to_utc if self.use_utc else self._keep_time,
        )

        as_json = self.log_format == LogFormat.JSON
        common = {"level": self.level, "enqueue": self.enqueue, "diagnose": False}

        if write_to_console:
            self._logger.add(
                sys.stderr,
                colorize=self.colorize,
                format=self._render_json if as_json else self._render_console,
                **common,
            )

        if write_to_file:
            self.base_log_dir.mkdir(parents=True, exist_ok=True)
            self._logger.add(
                self.base_log_dir / "{time:YYYY-MM-DD}.log",
                rotation=self.rotation,
                retention=self.retention,
                compression=self.compression,
                format=self._render_json if as_json else self._render_text,
                **common,
            )

        self._is_initialized = True
        self._logger.info(
            f"Logger ready: level={self.level} format={self.log_format} "
            f"utc={self.use_utc} file={write_to_file} console={write_to_console}"
        )
        return self._logger

    @staticmethod
    def _to_utc(record: Any) -> None:
        record["time"] = record["time"].astimezone(UTC)

    @staticmethod
    def _keep_time(record: Any) -> None:
        pass

    @staticmethod
    def _with_payload(fmt: str, record: Any) -> str:
        payload = record["extra"].get("json_content")
        if payload is not None:
            record["extra"]["_rendered"] = orjson_dumps(payload, default=str)
            fmt += "\n{extra[_rendered]}"
        return fmt + "\n{exception}"

    @classmethod
    def _render_console(cls, record: Any) -> str:
        return cls._with_payload(_CONSOLE_LAYOUT % _escape(_trace_id(record)), record)

    @classmethod
    def _render_text(cls, record: Any) -> str:
        return cls._with_payload(_TEXT_LAYOUT % _escape(_trace_id(record)), record)

    @staticmethod
    def _render_json(record: Any) -> str:
        """每条日志一行 JSON，extra 中的业务字段平铺输出"""
        line = {
            "time": _iso_utc(record),
            "level": record["level"].name,
            "trace_id": _trace_id(record),
            "location": f"{record['name']}.{record['function']}:{record['line']}",
            "message": record["message"],
        }
        line.update((k, v) for k, v in record["extra"].items() if k not in _INTERNAL_EXTRA)

        payload = record["extra"].get("json_content")
        if payload is not None:
            line["json_content"] = payload
        if record["exception"] is not None:
            line["exception"] = repr(record["exception"].value)

        record["extra"]["_rendered"] = orjson_dumps(line, default=str)
        return "{extra[_rendered]}\n"
