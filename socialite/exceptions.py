"""第三方认证异常定义

错误分类：
    - MissingParameterError: 调用方输入错误（缺少必填参数），不可恢复
    - ProviderError: 第三方平台在响应体中返回了非零错误码
    - ResponseParseError: 响应体格式异常（字段缺失、解码失败）
    - TransportError: 网络错误或非预期的 HTTP 状态码
    - UnsupportedOperationError: 平台不支持该操作
"""

from typing import Any


class SocialiteError(Exception):
    """所有第三方认证异常的基类"""

    def __init__(self, detail: str = "", code: int = 0):
        super().__init__(detail)
        self.code = code
        self.detail = detail

    def __str__(self):
        return self.detail


class MissingParameterError(SocialiteError, ValueError):
    pass


class ProviderError(SocialiteError):
    """
    第三方平台返回的业务错误。

    Attributes:
        code: 平台错误码
        detail: 平台错误描述
        platform: 平台名称
        result: 已填充错误字段的响应记录（TokenResponse / OpenIdentity / UserProfile）
    """

    def __init__(self, platform: str, code: int, detail: str = "", result: Any = None):
        super().__init__(detail, code)
        self.platform = platform
        self.result = result

    def __str__(self):
        return f"{self.platform} API error: code={self.code}, detail={self.detail}"


class ResponseParseError(SocialiteError, ValueError):
    pass


class TransportError(SocialiteError):
    pass


class UnsupportedOperationError(SocialiteError, NotImplementedError):
    def __init__(self, platform: str, operation: str):
        super().__init__(f"{platform} does not support {operation}")
        self.platform = platform
        self.operation = operation
