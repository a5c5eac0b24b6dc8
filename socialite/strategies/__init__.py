"""第三方认证策略实现模块"""

from .qq import QQAuthStrategy
from .wechat import WeChatAuthStrategy
from .weibo import WeiboAuthStrategy

__all__ = [
    "QQAuthStrategy",
    "WeChatAuthStrategy",
    "WeiboAuthStrategy",
]
