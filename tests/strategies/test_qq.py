from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest
import pytest_asyncio

from socialite import (
    Gender,
    MissingParameterError,
    ProviderError,
    QQAuthStrategy,
    QQConfig,
    ResponseParseError,
    TransportError,
)
from tests.helpers import make_result, missing_any

TOKEN_OK = "access_token=FE04************************CCE2&expires_in=7776000&refresh_token=88E4************************BE14"
TOKEN_ERR = '{"error":100004,"error_description":"param grant_type is wrong or lost "}'
ME_OK = 'callback( {"client_id":"YOUR_APPID","openid":"YOUR_OPENID"} );'
ME_ERR = 'callback( {"error":100016,"error_description":"access token check failed"} );'


@pytest_asyncio.fixture
async def qq(qq_config):
    strategy = QQAuthStrategy(config=qq_config)
    yield strategy
    await strategy.close()


class TestQQAuthorizeURL:
    """测试授权地址生成"""

    def test_state_only(self, qq):
        assert qq.get_authorize_url("rand_str") == (
            "https://graph.qq.com/oauth2.0/authorize?client_id=test_app_id"
            "&redirect_uri=http%3A%2F%2Flocalhost%2Fredirect_uri&response_type=code&state=rand_str"
        )

    def test_state_and_scope(self, qq):
        assert qq.get_authorize_url("rand_str", "get_user_info") == (
            "https://graph.qq.com/oauth2.0/authorize?client_id=test_app_id"
            "&redirect_uri=http%3A%2F%2Flocalhost%2Fredirect_uri&response_type=code"
            "&scope=get_user_info&state=rand_str"
        )

    def test_extra_args_are_ignored(self, qq):
        expected = (
            "https://graph.qq.com/oauth2.0/authorize?client_id=test_app_id&display=pc"
            "&redirect_uri=http%3A%2F%2Flocalhost%2Fredirect_uri&response_type=code"
            "&scope=get_user_info&state=rand_str"
        )
        assert qq.get_authorize_url("rand_str", "get_user_info", "pc") == expected
        assert qq.get_authorize_url("rand_str", "get_user_info", "pc", "extra") == expected

    def test_keys_sorted_and_values_encoded(self, qq):
        url = qq.get_authorize_url("a b&c", "get_user_info,list_album", "mobile")
        query = urlsplit(url).query
        keys = [k for k, _ in parse_qsl(query)]

        assert keys == sorted(keys)
        assert "state=a+b%26c" in query
        assert "scope=get_user_info%2Clist_album" in query

    @pytest.mark.parametrize("args", [(), ("",)])
    def test_missing_state_raises(self, qq, args):
        with pytest.raises(MissingParameterError):
            qq.get_authorize_url(*args)


class TestQQToken:
    """测试授权码换取 access_token"""

    async def test_success(self, qq_config, fake_client):
        def handler(request, values):
            if missing_any(values, ["grant_type", "client_id", "client_secret", "code", "redirect_uri"]):
                return 200, f"callback( {TOKEN_ERR} );"
            return 200, TOKEN_OK

        client = fake_client(handler)
        async with QQAuthStrategy(qq_config, http_client=client) as qq:
            token = await qq.get_access_token("code")

        assert token.ok
        assert token.error_code == 0
        assert token.access_token == "FE04************************CCE2"
        assert token.expires_in == 7776000
        assert token.refresh_token == "88E4************************BE14"
        assert client.requests[0].url.params["grant_type"] == "authorization_code"
        assert client.requests[0].method == "GET"

    async def test_provider_error(self, qq_config, fake_client):
        def handler(request, values):
            if missing_any(values, ["grant_type", "client_id", "client_secret", "code", "redirect_uri"]):
                return 200, f"callback( {TOKEN_ERR} );"
            return 200, TOKEN_OK

        qq = QQAuthStrategy(qq_config, http_client=fake_client(handler))

        with pytest.raises(ProviderError) as exc_info:
            await qq.get_access_token("")

        assert exc_info.value.code == 100004
        assert exc_info.value.result.error_code == 100004
        assert exc_info.value.result.error_message == "param grant_type is wrong or lost "
        assert exc_info.value.result.access_token == ""

    async def test_refresh_success(self, qq_config, fake_client):
        def handler(request, values):
            if missing_any(values, ["grant_type", "client_id", "client_secret", "refresh_token"]):
                return 200, f"callback( {TOKEN_ERR} );"
            return 200, TOKEN_OK

        client = fake_client(handler)
        qq = QQAuthStrategy(qq_config, http_client=client)
        token = await qq.refresh_token("refresh-token")

        assert token.access_token == "FE04************************CCE2"
        assert token.refresh_token == "88E4************************BE14"
        assert client.requests[0].url.params["grant_type"] == "refresh_token"

    async def test_refresh_provider_error(self, qq_config, fake_client):
        def handler(request, values):
            if missing_any(values, ["grant_type", "client_id", "client_secret", "refresh_token"]):
                return 200, f"callback( {TOKEN_ERR} );"
            return 200, TOKEN_OK

        qq = QQAuthStrategy(qq_config, http_client=fake_client(handler))

        with pytest.raises(ProviderError) as exc_info:
            await qq.refresh_token("")
        assert exc_info.value.result.error_code == 100004

    async def test_network_error(self, qq_config, fake_client):
        def handler(request, values):
            raise httpx.ConnectError("connection refused", request=request)

        qq = QQAuthStrategy(qq_config, http_client=fake_client(handler))

        with pytest.raises(TransportError):
            await qq.get_access_token("code")


class TestQQTokenParsing:
    """直接测试响应体解析"""

    def test_callback_wrapped_error(self, qq):
        body = 'callback( {"error":100002,"error_description":"param client_secret is wrong or lost "} );'

        with pytest.raises(ProviderError) as exc_info:
            qq._parse_token(make_result(body))

        assert exc_info.value.code == 100002
        assert exc_info.value.result.error_code == 100002
        assert exc_info.value.result.error_message == "param client_secret is wrong or lost "

    def test_query_string_success(self, qq):
        token = qq._parse_token(make_result(TOKEN_OK))

        assert token.error_code == 0
        assert token.error_message == ""
        assert token.access_token == "FE04************************CCE2"
        assert token.expires_in == 7776000
        assert token.refresh_token == "88E4************************BE14"
        assert token.raw_data["expires_in"] == "7776000"

    @pytest.mark.parametrize(
        "body",
        [
            "access_token=abc&expires_in=7776000",
            "",
            "access_token=abc&expires_in=soon&refresh_token=def",
        ],
    )
    def test_malformed_body(self, qq, body):
        with pytest.raises(ResponseParseError):
            qq._parse_token(make_result(body))

    def test_error_marker_without_json(self, qq):
        with pytest.raises(ResponseParseError):
            qq._parse_token(make_result("error occurred"))

    def test_http_error_without_provider_code(self, qq):
        with pytest.raises(TransportError):
            qq._parse_token(make_result("Bad Gateway", status=502))

    def test_gateway_html_error_page(self, qq):
        body = "<html><body>502 Bad Gateway nginx error</body></html>"

        with pytest.raises(TransportError) as exc_info:
            qq._parse_token(make_result(body, status=502))
        assert exc_info.value.code == 502

    def test_error_marker_without_code(self, qq):
        body = 'callback( {"error_description":"oops"} );'

        with pytest.raises(ResponseParseError):
            qq._parse_token(make_result(body))
        with pytest.raises(TransportError):
            qq._parse_token(make_result(body, status=502))

    def test_me_error_marker_without_code(self, qq):
        with pytest.raises(ResponseParseError):
            qq._parse_me(make_result('callback( {"error":"","error_description":"oops"} );'))


class TestQQMe:
    """测试 OpenID 查询"""

    async def test_success(self, qq_config, fake_client):
        def handler(request, values):
            if not values.get("access_token"):
                return 200, ME_ERR
            return 200, ME_OK

        qq = QQAuthStrategy(qq_config, http_client=fake_client(handler))
        me = await qq.get_me("ACCESS_TOKEN")

        assert me.ok
        assert me.client_id == "YOUR_APPID"
        assert me.open_id == "YOUR_OPENID"
        assert me.union_id == ""

    async def test_provider_error(self, qq_config, fake_client):
        def handler(request, values):
            if not values.get("access_token"):
                return 200, ME_ERR
            return 200, ME_OK

        qq = QQAuthStrategy(qq_config, http_client=fake_client(handler))

        with pytest.raises(ProviderError) as exc_info:
            await qq.get_me("")

        assert exc_info.value.result.error_code == 100016
        assert exc_info.value.result.error_message == "access token check failed"

    async def test_union_id(self, fake_client):
        config = QQConfig(
            app_id="test_app_id",
            app_secret="test_app_secret",
            redirect_url="http://localhost/redirect_uri",
            with_union_id=True,
        )

        def handler(request, values):
            assert values.get("unionid") == "1"
            return 200, 'callback( {"client_id":"YOUR_APPID","openid":"YOUR_OPENID","unionid":"YOUR_UNIONID"} );'

        qq = QQAuthStrategy(config, http_client=fake_client(handler))
        me = await qq.get_me("ACCESS_TOKEN")

        assert me.union_id == "YOUR_UNIONID"

    async def test_html_error_page_is_transport_error(self, qq_config, fake_client):
        body = "<html><body><h1>502 Bad Gateway</h1></body></html>"
        qq = QQAuthStrategy(qq_config, http_client=fake_client(lambda r, v: (502, body)))

        with pytest.raises(TransportError) as exc_info:
            await qq.get_me("ACCESS_TOKEN")
        assert exc_info.value.code == 502


class TestQQUserInfo:
    """测试用户信息获取"""

    USER_INFO = (
        '{"ret":0,"msg":"","is_lost":0,"nickname":"YOUR_NICK_NAME","gender":"女","gender_type":2,'
        '"province":"广东","city":"深圳","year":"1990","constellation":"",'
        '"figureurl":"http://qzapp.qlogo.cn/qzapp/1/30","figureurl_1":"http://qzapp.qlogo.cn/qzapp/1/50",'
        '"figureurl_2":"http://qzapp.qlogo.cn/qzapp/1/100","figureurl_qq_1":"http://thirdqq.qlogo.cn/1/40",'
        '"figureurl_qq_2":"http://thirdqq.qlogo.cn/1/100","is_yellow_vip":"0","vip":"0"}'
    )

    async def test_success_remaps_fields(self, qq_config, fake_client):
        def handler(request, values):
            if missing_any(values, ["access_token", "oauth_consumer_key", "openid"]):
                return 200, '{"ret":1002,"msg":"请先登录"}'
            return 200, self.USER_INFO

        client = fake_client(handler)
        qq = QQAuthStrategy(qq_config, http_client=client)
        profile = await qq.get_user_info("YOUR_ACCESS_TOKEN", "YOUR_OPENID")

        assert profile.ok
        assert profile.open_id == "YOUR_OPENID"
        assert profile.nickname == "YOUR_NICK_NAME"
        assert profile.gender == Gender.FEMALE
        assert profile.province == "广东"
        assert profile.city == "深圳"
        assert profile.avatar == "http://thirdqq.qlogo.cn/1/100"
        assert profile.raw_data["year"] == "1990"
        assert client.requests[0].url.params["oauth_consumer_key"] == "test_app_id"

    async def test_provider_error(self, qq_config, fake_client):
        qq = QQAuthStrategy(qq_config, http_client=fake_client(lambda r, v: (200, '{"ret":1001,"msg":"invalid openid"}')))

        with pytest.raises(ProviderError) as exc_info:
            await qq.get_user_info("", "")

        assert exc_info.value.code == 1001
        assert exc_info.value.result.error_message == "invalid openid"

    async def test_avatar_fallback(self, qq_config, fake_client):
        body = '{"ret":0,"msg":"","nickname":"n","gender":"男","figureurl_2":"http://qzapp.qlogo.cn/qzapp/1/100"}'
        qq = QQAuthStrategy(qq_config, http_client=fake_client(lambda r, v: (200, body)))
        profile = await qq.get_user_info("token", "openid")

        assert profile.gender == Gender.MALE
        assert profile.avatar == "http://qzapp.qlogo.cn/qzapp/1/100"

    async def test_html_error_page_is_transport_error(self, qq_config, fake_client):
        qq = QQAuthStrategy(qq_config, http_client=fake_client(lambda r, v: (500, "<html>Internal Server Error</html>")))

        with pytest.raises(TransportError):
            await qq.get_user_info("token", "openid")

    def test_platform_name(self, qq):
        assert qq.get_platform_name() == "qq"
