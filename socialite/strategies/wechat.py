"""微信登录策略实现 - 配置通过参数注入

@doc: https://developers.weixin.qq.com/doc/oplatform/Website_App/WeChat_Login/Wechat_Login.html
"""

from typing import Any

from socialite.base import (
    DEFAULT_HTTP_TIMEOUT,
    BaseThirdPartyAuthStrategy,
    Gender,
    TokenResponse,
    UserProfile,
)
from socialite.config import WeChatConfig
from socialite.exceptions import MissingParameterError
from socialite.toolkit.http_cli import AsyncHttpClient, RequestResult
from socialite.toolkit.string import build_url

_WECHAT_GENDERS = {1: Gender.MALE, 2: Gender.FEMALE}


class WeChatAuthStrategy(BaseThirdPartyAuthStrategy):
    """微信 OAuth2.0 认证策略

    微信在 HTTP 200 的 JSON 中通过 errcode / errmsg 返回错误，
    换取 access_token 时会一并返回 openid，因此不需要 get_me。

    使用示例:
        ```python
        strategy = WeChatAuthStrategy(
            config=WeChatConfig(
                app_id="your_app_id",
                app_secret="your_app_secret",
                redirect_url="https://example.com/callback",
            )
        )

        token = await strategy.get_access_token(code)
        profile = await strategy.get_user_info(
            access_token=token.access_token,
            open_id=token.open_id,
        )
        ```
    """

    # 微信 API 端点
    AUTHORIZE_URL = "https://open.weixin.qq.com/connect/qrconnect"
    ACCESS_TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/access_token"
    REFRESH_TOKEN_URL = "https://api.weixin.qq.com/sns/oauth2/refresh_token"
    USER_INFO_URL = "https://api.weixin.qq.com/sns/userinfo"

    def __init__(
        self,
        config: WeChatConfig,
        http_client: AsyncHttpClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        """
        初始化微信认证策略

        Args:
            config: 微信配置（通过依赖注入）
            http_client: 可选的 HTTP 客户端，默认新建
            timeout: 新建 HTTP 客户端时的超时时间（秒）
        """
        super().__init__(http_client=http_client, timeout=timeout)
        self.config = config

    def get_authorize_url(self, *args: str) -> str:
        """
        生成扫码登录授权地址，参数顺序：scope, state

        scope 必填（网站应用为 snsapi_login），多余的参数会被忽略。
        """
        if not args or not args[0]:
            raise MissingParameterError("args is invalid, please input scope, state")

        params = {
            "appid": self.config.app_id,
            "response_type": "code",
            "redirect_uri": self.config.redirect_url,
            "scope": args[0],
        }
        if len(args) >= 2 and args[1]:
            params["state"] = args[1]

        fragment = "wechat_redirect" if self.config.wechat_redirect else ""
        return build_url(self.AUTHORIZE_URL, params, fragment)

    async def get_access_token(self, code: str) -> TokenResponse:
        """
        通过授权码获取 access_token

        Args:
            code: 微信授权码

        Returns:
            TokenResponse: 包含 access_token、expires_in、refresh_token、openid、scope、unionid

        Raises:
            ProviderError: 当微信 API 返回错误码时
        """
        params = {
            "appid": self.config.app_id,
            "secret": self.config.app_secret,
            "code": code,
            "grant_type": self.config.grant_type,
        }

        result = await self._http_client.get(self.ACCESS_TOKEN_URL, params=params)
        return self._parse_token(result)

    async def refresh_token(self, refresh_token: str) -> TokenResponse:
        """刷新或续期 access_token，refresh_token 有效期为 30 天"""
        params = {
            "appid": self.config.app_id,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }

        result = await self._http_client.get(self.REFRESH_TOKEN_URL, params=params)
        return self._parse_token(result)

    async def get_user_info(self, access_token: str, open_id: str) -> UserProfile:
        """
        获取微信用户信息

        Args:
            access_token: 微信 access_token
            open_id: 微信 open_id

        Returns:
            UserProfile: 标准化的微信用户信息（sex → gender，headimgurl → avatar）

        Raises:
            ProviderError: 当微信 API 返回错误码时
        """
        params = {
            "access_token": access_token,
            "openid": open_id,
            "lang": self.config.lang,
        }

        result = await self._http_client.get(self.USER_INFO_URL, params=params)
        data = self._checked_json(result, UserProfile(), "get_user_info")

        return UserProfile(
            open_id=data.get("openid", ""),
            union_id=data.get("unionid", ""),
            nickname=data.get("nickname", ""),
            gender=_WECHAT_GENDERS.get(self._as_int(data.get("sex"), "sex"), Gender.UNKNOWN),
            province=data.get("province", ""),
            city=data.get("city", ""),
            country=data.get("country", ""),
            avatar=data.get("headimgurl", ""),
            raw_data=data,
        )

    def get_platform_name(self) -> str:
        """获取平台名称"""
        return "wechat"

    def _parse_token(self, result: RequestResult) -> TokenResponse:
        data = self._checked_json(result, TokenResponse(), "token")

        return TokenResponse(
            access_token=data.get("access_token", ""),
            expires_in=self._as_int(data.get("expires_in"), "expires_in"),
            refresh_token=data.get("refresh_token", ""),
            open_id=data.get("openid", ""),
            union_id=data.get("unionid", ""),
            scope=data.get("scope", ""),
            raw_data=data,
        )

    def _checked_json(self, result: RequestResult, record: Any, operation: str) -> dict[str, Any]:
        """解码 JSON 并检查微信返回的 errcode"""
        data = self._decode_json(self._response_body(result), result)

        errcode = self._as_int(data.get("errcode"), "errcode")
        if errcode != 0:
            record.raw_data = data
            self._raise_provider_error(record, errcode, data.get("errmsg", ""), operation)

        self._ensure_http_ok(result)
        return data
