"""微博登录策略实现 - 配置通过参数注入

@doc: https://open.weibo.com/wiki/授权机制说明
@doc: https://open.weibo.com/wiki/Oauth2/authorize
"""

from typing import Any

from socialite.base import (
    DEFAULT_HTTP_TIMEOUT,
    BaseThirdPartyAuthStrategy,
    Gender,
    TokenResponse,
    UserProfile,
)
from socialite.config import WeiboConfig
from socialite.toolkit.http_cli import AsyncHttpClient, RequestResult
from socialite.toolkit.string import build_url

# 授权地址的可选参数，按调用方传入的位置顺序
_AUTHORIZE_ARGS = ("state", "display", "forcelogin", "scope", "language")

_WEIBO_GENDERS = {"m": Gender.MALE, "f": Gender.FEMALE}


class WeiboAuthStrategy(BaseThirdPartyAuthStrategy):
    """微博 OAuth2.0 认证策略

    微博错误响应形如 {"error": "...", "error_code": 21325, "request": "..."}，
    可能伴随 4xx 状态码；不支持 refresh_token，换取令牌时返回 uid 作为用户标识。
    """

    AUTHORIZE_URL = "https://api.weibo.com/oauth2/authorize"
    ACCESS_TOKEN_URL = "https://api.weibo.com/oauth2/access_token"
    USER_INFO_URL = "https://api.weibo.com/2/users/show.json"

    def __init__(
        self,
        config: WeiboConfig,
        http_client: AsyncHttpClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(http_client=http_client, timeout=timeout)
        self.config = config

    def get_authorize_url(self, *args: str) -> str:
        """
        生成授权地址，参数顺序：state, display, forcelogin, scope, language

        所有位置参数均为可选，多余的参数会被忽略。
        """
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_url,
        }
        for key, value in zip(_AUTHORIZE_ARGS, args):
            if value:
                params[key] = value

        return build_url(self.AUTHORIZE_URL, params)

    async def get_access_token(self, code: str) -> TokenResponse:
        data = {
            "grant_type": "authorization_code",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_url,
            "code": code,
        }
        result = await self._http_client.post(self.ACCESS_TOKEN_URL, data=data)
        body = self._checked_json(result, TokenResponse(), "token")

        return TokenResponse(
            access_token=body.get("access_token", ""),
            expires_in=self._as_int(body.get("expires_in"), "expires_in"),
            open_id=str(body.get("uid", "")),
            scope=body.get("scope", ""),
            raw_data=body,
        )

    async def get_user_info(self, access_token: str, open_id: str) -> UserProfile:
        """
        获取微博用户信息，open_id 即换取令牌时返回的 uid
        """
        params = {
            "access_token": access_token,
            "uid": open_id,
        }
        result = await self._http_client.get(self.USER_INFO_URL, params=params)
        data = self._checked_json(result, UserProfile(open_id=open_id), "get_user_info")

        return UserProfile(
            open_id=str(data.get("idstr") or data.get("id") or open_id),
            nickname=data.get("screen_name") or data.get("name", ""),
            gender=_WEIBO_GENDERS.get(data.get("gender", ""), Gender.UNKNOWN),
            province=str(data.get("province", "")),
            city=str(data.get("city", "")),
            location=data.get("location", ""),
            avatar=data.get("avatar_large") or data.get("profile_image_url", ""),
            raw_data=data,
        )

    def get_platform_name(self) -> str:
        return "weibo"

    def _checked_json(self, result: RequestResult, record: Any, operation: str) -> dict[str, Any]:
        data = self._decode_json(self._response_body(result), result)

        error_code = self._as_int(data.get("error_code"), "error_code")
        if error_code != 0:
            record.raw_data = data
            self._raise_provider_error(record, error_code, data.get("error", ""), operation)

        self._ensure_http_ok(result)
        return data
