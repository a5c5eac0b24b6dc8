"""socialite - QQ / 微信 / 微博 第三方登录客户端

使用策略模式 + 工厂模式设计，各平台策略实现统一接口：
    - get_authorize_url: 生成授权跳转地址
    - get_access_token: 授权码换取 access_token
    - refresh_token: 刷新 access_token（微博不支持）
    - get_me: 查询 OpenID（仅 QQ）
    - get_user_info: 获取标准化的用户信息

各平台的响应格式（查询字符串、callback 包装的 JSON、JSON）与错误约定
被统一为 TokenResponse / OpenIdentity / UserProfile 三种结构。
平台返回错误码时抛出 ProviderError，exc.result 为填充了错误字段的记录。

使用示例:
    ```python
    from socialite import QQAuthStrategy, QQConfig

    async with QQAuthStrategy(
        config=QQConfig(app_id="...", app_secret="...", redirect_url="...")
    ) as strategy:
        url = strategy.get_authorize_url("state", "get_user_info")
        token = await strategy.get_access_token(code)
        me = await strategy.get_me(token.access_token)
        profile = await strategy.get_user_info(token.access_token, me.open_id)
    ```
"""

from .base import BaseThirdPartyAuthStrategy, Gender, OpenIdentity, TokenResponse, UserProfile
from .config import QQConfig, WeChatConfig, WeiboConfig
from .exceptions import (
    MissingParameterError,
    ProviderError,
    ResponseParseError,
    SocialiteError,
    TransportError,
    UnsupportedOperationError,
)
from .factory import ThirdPartyAuthFactory, ThirdPartyPlatform
from .settings import SocialiteSettings, load_settings
from .strategies import QQAuthStrategy, WeChatAuthStrategy, WeiboAuthStrategy

__all__ = [
    # 基础接口与响应结构
    "BaseThirdPartyAuthStrategy",
    "Gender",
    "OpenIdentity",
    "TokenResponse",
    "UserProfile",

    # 异常
    "SocialiteError",
    "MissingParameterError",
    "ProviderError",
    "ResponseParseError",
    "TransportError",
    "UnsupportedOperationError",

    # 工厂和枚举
    "ThirdPartyPlatform",
    "ThirdPartyAuthFactory",

    # 配置
    "QQConfig",
    "WeChatConfig",
    "WeiboConfig",
    "SocialiteSettings",
    "load_settings",

    # 具体策略
    "QQAuthStrategy",
    "WeChatAuthStrategy",
    "WeiboAuthStrategy",
]
