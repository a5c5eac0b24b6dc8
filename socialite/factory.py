"""第三方认证策略工厂 - 可复用的策略注册表"""

from enum import Enum
from typing import Any

from socialite.base import BaseThirdPartyAuthStrategy
from socialite.logger import logger
from socialite.settings import SocialiteSettings
from socialite.strategies.qq import QQAuthStrategy
from socialite.strategies.wechat import WeChatAuthStrategy
from socialite.strategies.weibo import WeiboAuthStrategy
from socialite.toolkit.http_cli import AsyncHttpClient


class ThirdPartyPlatform(str, Enum):
    """第三方平台枚举

    添加新平台时在此处声明，并通过 register_strategy 注册策略类。
    """

    QQ = "qq"
    WECHAT = "wechat"
    WEIBO = "weibo"


class ThirdPartyAuthFactory:
    """第三方认证策略工厂

    使用示例:
        ```python
        strategy = ThirdPartyAuthFactory.get_strategy(
            ThirdPartyPlatform.WECHAT,
            WeChatConfig(app_id="...", app_secret="...", redirect_url="..."),
        )

        # 或直接从环境变量读取凭证
        strategy = ThirdPartyAuthFactory.from_settings("qq", load_settings())
        ```
    """

    # 策略注册表
    _strategies: dict[ThirdPartyPlatform, type[BaseThirdPartyAuthStrategy]] = {
        ThirdPartyPlatform.QQ: QQAuthStrategy,
        ThirdPartyPlatform.WECHAT: WeChatAuthStrategy,
        ThirdPartyPlatform.WEIBO: WeiboAuthStrategy,
    }

    @classmethod
    def register_strategy(
        cls,
        platform: ThirdPartyPlatform,
        strategy_class: type[BaseThirdPartyAuthStrategy]
    ) -> None:
        """
        注册新的认证策略，同一平台重复注册时覆盖旧的策略类

        Args:
            platform: 平台标识
            strategy_class: 策略类
        """
        cls._strategies[platform] = strategy_class
        logger.info(f"Registered third-party auth strategy for {platform.value}")

    @classmethod
    def resolve_platform(cls, platform: ThirdPartyPlatform | str) -> ThirdPartyPlatform:
        """将字符串平台名转换为枚举，不区分大小写"""
        if isinstance(platform, ThirdPartyPlatform):
            return platform
        try:
            return ThirdPartyPlatform(platform.lower())
        except ValueError as e:
            raise ValueError(f"Unsupported third-party platform: {platform}") from e

    @classmethod
    def get_strategy(
        cls,
        platform: ThirdPartyPlatform | str,
        config: Any,
        http_client: AsyncHttpClient | None = None,
        **kwargs: Any,
    ) -> BaseThirdPartyAuthStrategy:
        """
        获取对应平台的认证策略实例

        Args:
            platform: 平台标识（字符串或枚举值）
            config: 平台配置（QQConfig / WeChatConfig / WeiboConfig）
            http_client: 可选的 HTTP 客户端
            **kwargs: 透传给策略构造函数的其他参数（如 timeout）

        Returns:
            BaseThirdPartyAuthStrategy: 策略实例

        Raises:
            ValueError: 当平台未注册时
        """
        platform = cls.resolve_platform(platform)

        strategy_class = cls._strategies.get(platform)
        if not strategy_class:
            raise ValueError(
                f"Third-party platform '{platform.value}' not supported. "
                f"Available platforms: {cls.get_available_platforms()}"
            )

        return strategy_class(config, http_client=http_client, **kwargs)

    @classmethod
    def from_settings(
        cls,
        platform: ThirdPartyPlatform | str,
        settings: SocialiteSettings,
        http_client: AsyncHttpClient | None = None,
    ) -> BaseThirdPartyAuthStrategy:
        """
        使用环境配置中的凭证创建策略实例

        Raises:
            ValueError: 平台未注册或该平台凭证未配置
        """
        platform = cls.resolve_platform(platform)
        config_builders = {
            ThirdPartyPlatform.QQ: settings.qq_config,
            ThirdPartyPlatform.WECHAT: settings.wechat_config,
            ThirdPartyPlatform.WEIBO: settings.weibo_config,
        }

        builder = config_builders.get(platform)
        if builder is None:
            raise ValueError(f"No settings available for platform '{platform.value}'")

        return cls.get_strategy(platform, builder(), http_client=http_client, timeout=settings.HTTP_TIMEOUT)

    @classmethod
    def get_available_platforms(cls) -> list[str]:
        """
        获取所有可用的平台列表
        """
        return [platform.value for platform in cls._strategies.keys()]
