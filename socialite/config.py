"""第三方认证配置数据类 - 类型安全的配置容器"""

from dataclasses import dataclass


@dataclass
class QQConfig:
    """QQ 互联配置

    Attributes:
        app_id: QQ 互联应用 AppID
        app_secret: QQ 互联应用 AppKey
        redirect_url: 授权回调地址
        with_union_id: 获取 OpenID 时是否同时请求 UnionID
    """

    app_id: str
    app_secret: str
    redirect_url: str
    with_union_id: bool = False

    def __post_init__(self) -> None:
        if not self.app_id or not self.app_secret or not self.redirect_url:
            raise ValueError("QQ config requires app_id, app_secret and redirect_url")


@dataclass
class WeChatConfig:
    """微信开放平台配置

    Attributes:
        app_id: 微信开放平台网站应用 AppID
        app_secret: 微信开放平台网站应用 AppSecret
        redirect_url: 授权回调地址
        grant_type: 授权类型，默认 'authorization_code'
        lang: 用户信息的语言版本，zh_CN / zh_TW / en
        wechat_redirect: 授权链接是否追加 #wechat_redirect 锚点
    """

    app_id: str
    app_secret: str
    redirect_url: str
    grant_type: str = "authorization_code"
    lang: str = "zh_CN"
    wechat_redirect: bool = False

    def __post_init__(self) -> None:
        if not self.app_id or not self.app_secret or not self.redirect_url:
            raise ValueError("WeChat config requires app_id, app_secret and redirect_url")


@dataclass
class WeiboConfig:
    """微博开放平台配置

    Attributes:
        client_id: 微博应用 App Key
        client_secret: 微博应用 App Secret
        redirect_url: 授权回调地址
    """

    client_id: str
    client_secret: str
    redirect_url: str

    def __post_init__(self) -> None:
        if not self.client_id or not self.client_secret or not self.redirect_url:
            raise ValueError("Weibo config requires client_id, client_secret and redirect_url")
