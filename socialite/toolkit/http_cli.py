"""
基于 httpx.AsyncClient 的请求封装。

与直接使用 httpx 的区别：
- 请求不会抛出网络异常，统一返回 RequestResult，由各平台策略决定如何解释状态码与响应体
- 请求日志中的密钥、授权码等参数会被脱敏
- 可注入 transport（测试时使用 httpx.MockTransport 模拟平台接口）
"""

from dataclasses import dataclass
from typing import Any

import httpx

from socialite.logger import logger
from socialite.toolkit.string import mask_params


@dataclass
class RequestResult:
    """
    Attributes:
        status_code: HTTP 状态码；网络错误时为 0
        response: 原始响应；未收到响应时为 None
        error: 错误描述；2xx 响应时为 None
    """

    status_code: int | None = None
    response: httpx.Response | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        if self.error is not None or self.status_code is None:
            return False
        return 200 <= self.status_code < 300

    @property
    def content(self) -> bytes:
        return self.response.content if self.response is not None else b""


class AsyncHttpClient:
    """长连接 HTTP 客户端，一个策略实例持有一个"""

    # 不固定 Content-Type，表单 POST 由 httpx 自动设置
    DEFAULT_HEADERS = {"Accept": "application/json"}

    def __init__(self, timeout: float = 30, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, headers=self.DEFAULT_HEADERS, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    @staticmethod
    def _get_error_message(response: httpx.Response) -> str:
        try:
            return response.text
        except Exception as e:
            logger.warning(f"Failed to decode error body: {e}")
            return f"Failed to get response.text, status_code={response.status_code}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> RequestResult:
        method, url = method.upper(), url.strip()
        logger.info(f"Req: {method} {url} | params={mask_params(params)} | data={mask_params(data)}")

        try:
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                data=data,
                timeout=timeout or self.timeout,
            )
        except httpx.HTTPStatusError as exc:
            logger.error(f"HTTPStatusError from {url}: {exc}")
            return RequestResult(exc.response.status_code, exc.response, f"HTTPStatusError: {exc}")
        except httpx.RequestError as exc:
            logger.error(f"RequestError to {url}: {exc!r}")
            return RequestResult(0, None, f"RequestError: {exc}")
        except Exception as exc:
            logger.exception(f"Unexpected error requesting {url}")
            return RequestResult(500, None, f"Internal Error: {exc}")

        logger.info(f"Resp: {method} {url} | status={response.status_code}")
        error = self._get_error_message(response) if response.is_error else None
        return RequestResult(response.status_code, response, error)

    async def get(self, url: str, **kwargs) -> RequestResult:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> RequestResult:
        return await self._request("POST", url, **kwargs)
