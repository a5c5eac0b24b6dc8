import re
from collections.abc import Mapping
from urllib.parse import urlencode

# 回调包装体: callback( {...} );
_JSON_OBJECT_PATTERN = re.compile(rb"\{.*\}", re.DOTALL)

# 需要在日志中脱敏的参数名
SENSITIVE_KEYS = frozenset({"client_secret", "secret", "access_token", "refresh_token", "code"})


def sorted_query_string(params: Mapping[str, str]) -> str:
    """
    按 key 字典序排序后生成查询字符串，值经过 URL 编码（空格编码为 '+'）。

    使用示例：
        >>> sorted_query_string({"state": "a b", "client_id": "1"})
        'client_id=1&state=a+b'
    """
    return urlencode(sorted(params.items()))


def build_url(endpoint: str, params: Mapping[str, str], fragment: str = "") -> str:
    """
    将排序后的查询字符串拼接到固定的端点上。

    >>> build_url("https://example.com/authorize", {"b": "2", "a": "1"})
    'https://example.com/authorize?a=1&b=2'
    """
    url = f"{endpoint}?{sorted_query_string(params)}"
    if fragment:
        url += f"#{fragment}"
    return url


def extract_json_object(body: bytes) -> bytes | None:
    """
    从非 JSON 的响应体中截取第一个 '{' 到最后一个 '}' 之间的 JSON 对象。

    >>> extract_json_object(b'callback( {"openid":"x"} );')
    b'{"openid":"x"}'
    """
    match = _JSON_OBJECT_PATTERN.search(body)
    if match is None:
        return None
    return match.group(0)


def mask_params(params: Mapping[str, str] | None) -> dict[str, str] | None:
    """日志输出前对敏感参数脱敏"""
    if params is None:
        return None
    return {k: ("******" if k in SENSITIVE_KEYS and v else v) for k, v in params.items()}
