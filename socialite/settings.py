"""环境配置模型定义"""

from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from socialite.config import QQConfig, WeChatConfig, WeiboConfig
from socialite.logger import LogFormat, logger
from socialite.toolkit.config import load_config


class SocialiteSettings(BaseSettings):
    """
    第三方登录凭证与运行参数，从环境变量（前缀 SOCIALITE_）或 .env 文件读取。
    """

    # --- QQ 互联 ---
    QQ_APP_ID: str = ""
    QQ_APP_SECRET: SecretStr = SecretStr("")
    QQ_REDIRECT_URL: str = ""
    QQ_WITH_UNION_ID: bool = False

    # --- 微信开放平台 ---
    WECHAT_APP_ID: str = ""
    WECHAT_APP_SECRET: SecretStr = SecretStr("")
    WECHAT_REDIRECT_URL: str = ""
    WECHAT_LANG: str = "zh_CN"

    # --- 微博开放平台 ---
    WEIBO_CLIENT_ID: str = ""
    WEIBO_CLIENT_SECRET: SecretStr = SecretStr("")
    WEIBO_REDIRECT_URL: str = ""

    # --- 运行参数 ---
    HTTP_TIMEOUT: float = 30
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.TEXT

    model_config = SettingsConfigDict(
        env_prefix="SOCIALITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("HTTP_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"HTTP_TIMEOUT must be positive, got {v}")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()

    def qq_config(self) -> QQConfig:
        return QQConfig(
            app_id=self.QQ_APP_ID,
            app_secret=self.QQ_APP_SECRET.get_secret_value(),
            redirect_url=self.QQ_REDIRECT_URL,
            with_union_id=self.QQ_WITH_UNION_ID,
        )

    def wechat_config(self) -> WeChatConfig:
        return WeChatConfig(
            app_id=self.WECHAT_APP_ID,
            app_secret=self.WECHAT_APP_SECRET.get_secret_value(),
            redirect_url=self.WECHAT_REDIRECT_URL,
            lang=self.WECHAT_LANG,
        )

    def weibo_config(self) -> WeiboConfig:
        return WeiboConfig(
            client_id=self.WEIBO_CLIENT_ID,
            client_secret=self.WEIBO_CLIENT_SECRET.get_secret_value(),
            redirect_url=self.WEIBO_REDIRECT_URL,
        )


def load_settings(file_path: str | Path | None = None) -> SocialiteSettings:
    """
    加载配置

    - 未指定文件：从环境变量与当前目录的 .env 读取
    - 指定文件：按扩展名（json / yaml / toml / env）读取，键名可带或不带 SOCIALITE_ 前缀，
      文件中的值覆盖环境变量

    Raises:
        FileNotFoundError: 文件不存在
        pydantic.ValidationError: 配置校验失败
    """
    if file_path is None:
        return SocialiteSettings()

    raw = load_config(file_path)
    prefix = SocialiteSettings.model_config["env_prefix"]
    values = {str(k).upper().removeprefix(prefix): v for k, v in raw.items()}
    known = values.keys() & SocialiteSettings.model_fields.keys()

    logger.info(f"Loaded settings from {file_path}: {sorted(known)}")
    return SocialiteSettings(**{k: values[k] for k in known})
