"""QQ 互联登录策略实现 - 配置通过参数注入

@doc: https://wiki.connect.qq.com/使用authorization_code获取access_token
"""

from typing import Any, NoReturn
from urllib.parse import parse_qs

from socialite.base import (
    DEFAULT_HTTP_TIMEOUT,
    BaseThirdPartyAuthStrategy,
    Gender,
    OpenIdentity,
    TokenResponse,
    UserProfile,
)
from socialite.config import QQConfig
from socialite.exceptions import MissingParameterError, ResponseParseError
from socialite.toolkit.http_cli import AsyncHttpClient, RequestResult
from socialite.toolkit.string import build_url, extract_json_object

# 错误响应标记：QQ 成功时返回查询字符串，失败时返回 callback( {...} );
_ERROR_MARKER = b"error"

_TOKEN_FIELDS = ("access_token", "expires_in", "refresh_token")

_QQ_GENDERS = {"男": Gender.MALE, "女": Gender.FEMALE}


class QQAuthStrategy(BaseThirdPartyAuthStrategy):
    """QQ OAuth2.0 认证策略

    QQ 的响应格式并不统一：
        - token 成功: access_token=...&expires_in=...&refresh_token=...
        - token 失败 / me: callback( {"error":100002,"error_description":"..."} );
        - get_user_info: JSON，错误码字段为 ret

    使用示例:
        ```python
        async with QQAuthStrategy(
            config=QQConfig(app_id="...", app_secret="...", redirect_url="...")
        ) as strategy:
            url = strategy.get_authorize_url("state", "get_user_info")
            token = await strategy.get_access_token(code)
            me = await strategy.get_me(token.access_token)
            profile = await strategy.get_user_info(token.access_token, me.open_id)
        ```
    """

    AUTHORIZE_URL = "https://graph.qq.com/oauth2.0/authorize"
    ACCESS_TOKEN_URL = "https://graph.qq.com/oauth2.0/token"
    ME_URL = "https://graph.qq.com/oauth2.0/me"
    USER_INFO_URL = "https://graph.qq.com/user/get_user_info"

    def __init__(
        self,
        config: QQConfig,
        http_client: AsyncHttpClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self.config = config

    def get_authorize_url(self, *args: str) -> str:
        """
        生成授权地址，参数顺序：state, scope, display

        state 必填，多余的参数会被忽略。
        """
        if not args or not args[0]:
            raise MissingParameterError("args is invalid, please input state, scope, display")

        params = {
            "response_type": "code",
            "client_id": self.config.app_id,
            "redirect_uri": self.config.redirect_url,
            "state": args[0],
        }
        for key, value in zip(("scope", "display"), args[1:3]):
            if value:
                params[key] = value

        return build_url(self.AUTHORIZE_URL, params)

    async def get_access_token(self, code: str) -> TokenResponse:
        params = {
            "grant_type": "authorization_code",
            "client_id": self.config.app_id,
            "client_secret": self.config.app_secret,
            "code": code,
            "redirect_uri": self.config.redirect_url,
        }
        result = await self._http_client.get(self.ACCESS_TOKEN_URL, params=params)
        return self._parse_token(result)

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        params = {
            "grant_type": "refresh_token",
            "client_id": self.config.app_id,
            "client_secret": self.config.app_secret,
            "refresh_token": refresh_token,
        }
        result = await self._http_client.get(self.ACCESS_TOKEN_URL, params=params)
        return self._parse_token(result)

    async def get_me(self, access_token: str) -> OpenIdentity:
        params = {"access_token": access_token}
        if self.config.with_union_id:
            params["unionid"] = "1"

        result = await self._http_client.get(self.ME_URL, params=params)
        return self._parse_me(result)

    async def get_user_info(self, access_token: str, open_id: str) -> UserProfile:
        params = {
            "access_token": access_token,
            "oauth_consumer_key": self.config.app_id,
            "openid": open_id,
        }
        result = await self._http_client.get(self.USER_INFO_URL, params=params)
        body = self._response_body(result)
        data = self._decode_json(body, result)

        profile = UserProfile(open_id=open_id, raw_data=data)
        ret = self._as_int(data.get("ret"), "ret")
        if ret != 0:
            self._raise_provider_error(profile, ret, data.get("msg", ""), "get_user_info")
        self._ensure_http_ok(result)

        profile.nickname = data.get("nickname", "")
        profile.gender = _QQ_GENDERS.get(data.get("gender", ""), Gender.UNKNOWN)
        profile.province = data.get("province", "")
        profile.city = data.get("city", "")
        profile.avatar = self._pick_avatar(data)
        return profile

    def get_platform_name(self) -> str:
        return "qq"

    # --- 响应解析 ---

    def _parse_token(self, result: RequestResult) -> TokenResponse:
        body = self._response_body(result)
        token = TokenResponse()

        if _ERROR_MARKER in body:
            self._raise_callback_error(token, body, result, "token")

        self._ensure_http_ok(result)

        query = parse_qs(body.decode("utf-8", "replace").strip())
        if any(not query.get(name) for name in _TOKEN_FIELDS):
            raise ResponseParseError(f"qq token response is invalid: {body[:200]!r}")

        token.raw_data = {k: v[0] for k, v in query.items()}
        token.access_token = query["access_token"][0]
        token.expires_in = self._as_int(query["expires_in"][0], "expires_in")
        token.refresh_token = query["refresh_token"][0]
        return token

    def _parse_me(self, result: RequestResult) -> OpenIdentity:
        body = self._response_body(result)
        identity = OpenIdentity()

        if _ERROR_MARKER in body:
            self._raise_callback_error(identity, body, result, "me")

        data = self._decode_callback(body, result)
        self._ensure_http_ok(result)

        identity.raw_data = data
        identity.client_id = data.get("client_id", "")
        identity.open_id = data.get("openid", "")
        identity.union_id = data.get("unionid", "")
        return identity

    def _raise_callback_error(self, record: Any, body: bytes, result: RequestResult, operation: str) -> NoReturn:
        """响应体含 error 标记：解析 {"error": ..., "error_description": ...} 并抛出"""
        data = self._decode_callback(body, result)
        code = self._as_int(data.get("error"), "error")
        if code == 0:
            self._raise_unreadable(result, body, "has an error marker but no error code")

        record.raw_data = data
        self._raise_provider_error(record, code, data.get("error_description", ""), operation)

    def _decode_callback(self, body: bytes, result: RequestResult | None = None) -> dict[str, Any]:
        """解析 callback( {...} ); 包装的 JSON"""
        payload = extract_json_object(body)
        if payload is None:
            self._raise_unreadable(result, body, "has no JSON object")
        return self._decode_json(payload, result)

    @staticmethod
    def _pick_avatar(data: dict[str, Any]) -> str:
        for key in ("figureurl_qq_2", "figureurl_qq_1", "figureurl_2", "figureurl_1", "figureurl"):
            if data.get(key):
                return data[key]
        return ""
