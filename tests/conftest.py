"""
Pytest 配置文件 (conftest.py)

提供测试运行所需的共享 fixtures、hooks 和配置：
1. 各平台的测试配置
2. 基于 httpx.MockTransport 的假服务端（模拟各平台接口的参数校验）
3. loguru 日志捕获
"""

import asyncio
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from loguru import logger as loguru_logger

# ==========================================
# 1. 路径配置
# ==========================================

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from socialite.config import QQConfig, WeChatConfig, WeiboConfig  # noqa: E402
from socialite.toolkit.http_cli import AsyncHttpClient  # noqa: E402
from tests.helpers import request_values  # noqa: E402

# 假服务端的处理函数：接收请求参数（query + form 合并），返回 (状态码, 响应体)
FakeHandler = Callable[[httpx.Request, dict[str, str]], tuple[int, str]]


# ==========================================
# 2. pytest 配置 hooks
# ==========================================


def pytest_configure(config: pytest.Config):
    config.addinivalue_line("markers", "unit: 单元测试，不依赖外部服务")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """为所有 async 测试函数自动添加 asyncio marker"""
    for item in items:
        if isinstance(item, pytest.Function) and asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


# ==========================================
# 3. 平台配置 Fixtures
# ==========================================


@pytest.fixture
def qq_config() -> QQConfig:
    return QQConfig(
        app_id="test_app_id",
        app_secret="test_app_secret",
        redirect_url="http://localhost/redirect_uri",
    )


@pytest.fixture
def wechat_config() -> WeChatConfig:
    return WeChatConfig(app_id="APPID", app_secret="SECRET", redirect_url="REDIRECT_URI")


@pytest.fixture
def weibo_config() -> WeiboConfig:
    return WeiboConfig(client_id="CLIENT_ID", client_secret="CLIENT_SECRET", redirect_url="REDIRECT_URI")


# ==========================================
# 4. 假服务端 Fixtures
# ==========================================


@pytest_asyncio.fixture
async def fake_client() -> AsyncGenerator[Callable[[FakeHandler], AsyncHttpClient], None]:
    """
    创建挂载假服务端的 AsyncHttpClient，测试结束后统一关闭。

    用法:
        client = fake_client(lambda request, values: (200, "body"))
    """
    clients: list[AsyncHttpClient] = []
    seen: list[httpx.Request] = []

    def _make(handler: FakeHandler) -> AsyncHttpClient:
        def _transport(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            status, body = handler(request, request_values(request))
            return httpx.Response(status, text=body)

        client = AsyncHttpClient(timeout=5, transport=httpx.MockTransport(_transport))
        client.requests = seen
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()


# ==========================================
# 5. 日志捕获 Fixture
# ==========================================


@pytest.fixture
def log_messages() -> list[str]:
    """捕获 loguru 输出的消息文本"""
    messages: list[str] = []
    handler_id = loguru_logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    loguru_logger.remove(handler_id)
