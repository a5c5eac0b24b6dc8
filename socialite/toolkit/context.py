"""调用链上下文：为一次 OAuth 流程绑定 trace_id，日志格式化器从这里读取"""

import uuid
from contextvars import ContextVar

_trace_id: ContextVar[str | None] = ContextVar("socialite_trace_id", default=None)


def set_trace_id(trace_id: str | None = None) -> str:
    if trace_id is not None and not isinstance(trace_id, str):
        raise ValueError("trace_id must be a string")

    trace_id = trace_id or uuid.uuid4().hex
    _trace_id.set(trace_id)
    return trace_id


def get_trace_id() -> str:
    return _trace_id.get() or "-"


def reset_trace_id() -> None:
    _trace_id.set(None)
