"""第三方认证策略抽象基类 - 无业务依赖的通用接口"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NoReturn

from socialite.exceptions import (
    ProviderError,
    ResponseParseError,
    TransportError,
    UnsupportedOperationError,
)
from socialite.logger import logger
from socialite.toolkit.http_cli import AsyncHttpClient, RequestResult
from socialite.toolkit.json import orjson_loads

DEFAULT_HTTP_TIMEOUT = 30


class Gender(StrEnum):
    MALE = "m"
    FEMALE = "f"
    UNKNOWN = "n"


@dataclass
class TokenResponse:
    """access_token 响应统一结构

    Attributes:
        access_token: 访问令牌
        expires_in: 有效期（秒）
        refresh_token: 刷新令牌（微博不返回）
        open_id: 用户标识（微信 openid / 微博 uid）
        union_id: 跨应用统一标识（微信 unionid）
        scope: 用户授权的作用域
        error_code: 平台错误码，成功时为 0
        error_message: 平台错误描述，成功时为空
        raw_data: 原始数据（保留扩展性）
    """

    access_token: str = ""
    expires_in: int = 0
    refresh_token: str = ""
    open_id: str = ""
    union_id: str = ""
    scope: str = ""
    error_code: int = 0
    error_message: str = ""
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_code == 0


@dataclass
class OpenIdentity:
    """OpenID 查询结果（仅 QQ 需要单独查询）"""

    client_id: str = ""
    open_id: str = ""
    union_id: str = ""
    error_code: int = 0
    error_message: str = ""
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_code == 0


@dataclass
class UserProfile:
    """第三方用户信息统一结构

    Attributes:
        open_id: 第三方平台唯一标识
        union_id: 跨应用统一标识（可选，如微信 UnionID）
        nickname: 昵称
        gender: 性别
        province / city / country / location: 地区信息
        avatar: 头像 URL
        error_code: 平台错误码，成功时为 0
        error_message: 平台错误描述，成功时为空
        raw_data: 原始数据（保留扩展性）
    """

    open_id: str = ""
    union_id: str = ""
    nickname: str = ""
    gender: Gender = Gender.UNKNOWN
    province: str = ""
    city: str = ""
    country: str = ""
    location: str = ""
    avatar: str = ""
    error_code: int = 0
    error_message: str = ""
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_code == 0


class BaseThirdPartyAuthStrategy(ABC):
    """第三方认证策略抽象基类

    所有第三方登录策略都必须实现此接口。
    策略应该是无状态的，配置通过构造函数注入。
    平台不支持的操作（如微博刷新令牌）抛出 UnsupportedOperationError。
    """

    def __init__(self, http_client: AsyncHttpClient | None = None, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self._http_client = http_client or AsyncHttpClient(timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @abstractmethod
    def get_authorize_url(self, *args: str) -> str:
        """
        生成授权跳转地址

        Args:
            *args: 有序的可选参数，各平台含义不同（state、scope、display 等）

        Returns:
            授权地址，查询参数按 key 排序

        Raises:
            MissingParameterError: 缺少平台要求的首个必填参数
        """

    @abstractmethod
    async def get_access_token(self, code: str) -> TokenResponse:
        """
        通过授权码获取 access_token

        Raises:
            ProviderError: 平台返回错误码，exc.result 为填充了错误字段的 TokenResponse
            ResponseParseError: 响应体格式异常
            TransportError: 网络错误
        """

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """
        通过 refresh_token 刷新 access_token

        Raises:
            UnsupportedOperationError: 平台不支持刷新
        """
        raise UnsupportedOperationError(self.get_platform_name(), "refresh_token")

    async def get_me(self, access_token: str) -> OpenIdentity:
        """
        通过 access_token 查询 OpenID，仅需要单独查询的平台实现

        Raises:
            UnsupportedOperationError: 平台在换取令牌时已返回用户标识
        """
        raise UnsupportedOperationError(self.get_platform_name(), "get_me")

    @abstractmethod
    async def get_user_info(self, access_token: str, open_id: str) -> UserProfile:
        """
        获取第三方用户信息

        Args:
            access_token: 访问令牌
            open_id: 用户唯一标识（微博为 uid）

        Returns:
            UserProfile: 标准化的用户信息
        """

    @abstractmethod
    def get_platform_name(self) -> str:
        """
        获取平台名称

        Returns:
            平台名称，如 'qq', 'wechat', 'weibo'
        """

    async def close(self) -> None:
        """关闭 HTTP 客户端"""
        await self._http_client.close()

    # --- 子类共用的响应处理 ---

    def _response_body(self, result: RequestResult) -> bytes:
        """取出响应体；请求未拿到任何响应时视为网络错误"""
        if result.response is None:
            logger.error(f"{self.get_platform_name()} request failed: {result.error}")
            raise TransportError(f"{self.get_platform_name()} request failed: {result.error}")
        return result.content

    def _ensure_http_ok(self, result: RequestResult) -> None:
        """响应体中没有平台错误码时，再检查 HTTP 状态码"""
        if not result.success:
            logger.error(f"{self.get_platform_name()} API failed: HTTP {result.status_code} {result.error}")
            raise TransportError(
                f"{self.get_platform_name()} API failed: HTTP {result.status_code}",
                code=result.status_code or 0,
            )

    def _decode_json(self, body: bytes, result: RequestResult | None = None) -> dict[str, Any]:
        """
        解析 JSON 对象

        传入 result 时，非 2xx 响应的响应体无法解析（如网关返回的 HTML 错误页）按网络错误处理。
        """
        try:
            data = orjson_loads(body)
        except ValueError as e:
            self._raise_unreadable(result, body, "is not valid JSON", e)

        if not isinstance(data, dict):
            self._raise_unreadable(result, body, "is not a JSON object")
        return data

    def _raise_unreadable(
        self, result: RequestResult | None, body: bytes, reason: str, cause: Exception | None = None
    ) -> NoReturn:
        """响应体无法解析：非 2xx 时抛出 TransportError，否则抛出 ResponseParseError"""
        logger.error(f"{self.get_platform_name()} response {reason}: {body[:200]!r}")
        if result is not None:
            self._ensure_http_ok(result)
        raise ResponseParseError(f"{self.get_platform_name()} response {reason}") from cause

    def _as_int(self, value: Any, name: str) -> int:
        """将响应中的数字字段（可能是字符串）转为 int，缺失时为 0"""
        if value is None or value == "":
            return 0
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ResponseParseError(f"{self.get_platform_name()} field '{name}' is not an integer: {value!r}") from e

    def _raise_provider_error(self, result: Any, code: int, message: str, operation: str) -> NoReturn:
        result.error_code = code
        result.error_message = message
        logger.error(f"{self.get_platform_name()} {operation} error: code={code}, msg={message}")
        raise ProviderError(self.get_platform_name(), code, message, result)
