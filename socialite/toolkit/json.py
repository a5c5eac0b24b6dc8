"""orjson 序列化封装，统一 dataclass / 枚举 / bytes 的输出"""

from datetime import timedelta
from typing import Any, TypeAlias

import orjson

# 时间统一按 UTC 输出并以 Z 结尾；允许 int 等非字符串 key
_OPTIONS = orjson.OPT_NAIVE_UTC | orjson.OPT_UTC_Z | orjson.OPT_NON_STR_KEYS

JsonInput: TypeAlias = str | bytes | bytearray | memoryview


def _fallback(obj: Any) -> Any:
    match obj:
        case bytes():
            return obj.decode("utf-8", "replace")
        case set() | frozenset():
            return sorted(obj, key=str)
        case timedelta():
            return obj.total_seconds()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def orjson_dumps(obj: Any, *, default: Any = None, indent: bool = False) -> str:
    """序列化为 str；失败时抛出 ValueError"""
    option = _OPTIONS | orjson.OPT_INDENT_2 if indent else _OPTIONS
    try:
        return orjson.dumps(obj, default=default or _fallback, option=option).decode("utf-8")
    except orjson.JSONEncodeError as e:
        raise ValueError(f"JSON serialization failed for {type(obj).__name__}: {e}") from e


def orjson_loads(data: JsonInput) -> Any:
    """反序列化；失败时抛出 ValueError（orjson.JSONDecodeError 本身即 ValueError 子类）"""
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"JSON deserialization failed: {e}") from e
