"""测试辅助函数：模拟平台服务端读取请求参数"""

from urllib.parse import parse_qs

import httpx

from socialite.toolkit.http_cli import RequestResult


def request_values(request: httpx.Request) -> dict[str, str]:
    """合并 query 参数与表单参数，等价于服务端读取 form value"""
    values = dict(request.url.params)
    if request.method == "POST" and request.content:
        for key, items in parse_qs(request.content.decode("utf-8")).items():
            values[key] = items[0]
    return values


def missing_any(values: dict[str, str], names: list[str]) -> bool:
    return any(not values.get(name) for name in names)


def make_result(body: str, status: int = 200) -> RequestResult:
    """构造一个已收到响应的 RequestResult，用于直接测试响应解析"""
    return RequestResult(status_code=status, response=httpx.Response(status, text=body))
