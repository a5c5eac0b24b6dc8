"""命令行入口：使用环境配置中的凭证手动走一遍 OAuth 流程，结果以 JSON 输出"""

import argparse
import asyncio
import dataclasses
import sys
from collections.abc import Sequence
from typing import Any

from socialite.exceptions import ProviderError, SocialiteError
from socialite.factory import ThirdPartyAuthFactory, ThirdPartyPlatform
from socialite.logger import init_logger, logger
from socialite.settings import load_settings
from socialite.toolkit import context
from socialite.toolkit.json import orjson_dumps


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="socialite", description="QQ / WeChat / Weibo OAuth client")
    parser.add_argument("--config", default=None, help="Settings file (json / yaml / toml / env)")
    platforms = [p.value for p in ThirdPartyPlatform]

    sub = parser.add_subparsers(dest="command", required=True)

    authorize = sub.add_parser("authorize-url", help="Build the authorization redirect URL")
    authorize.add_argument("platform", choices=platforms)
    authorize.add_argument("args", nargs="*", help="Ordered provider parameters, e.g. state scope display")

    token = sub.add_parser("token", help="Exchange an authorization code for an access token")
    token.add_argument("platform", choices=platforms)
    token.add_argument("code")

    refresh = sub.add_parser("refresh", help="Refresh an access token")
    refresh.add_argument("platform", choices=platforms)
    refresh.add_argument("refresh_token")

    me = sub.add_parser("me", help="Look up the open id of an access token")
    me.add_argument("platform", choices=platforms)
    me.add_argument("access_token")

    userinfo = sub.add_parser("userinfo", help="Fetch the user profile")
    userinfo.add_argument("platform", choices=platforms)
    userinfo.add_argument("access_token")
    userinfo.add_argument("open_id")

    return parser


async def run(args: argparse.Namespace) -> Any:
    settings = load_settings(args.config)
    init_logger(level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
    context.set_trace_id()

    async with ThirdPartyAuthFactory.from_settings(args.platform, settings) as strategy:
        match args.command:
            case "authorize-url":
                return {"url": strategy.get_authorize_url(*args.args)}
            case "token":
                return await strategy.get_access_token(args.code)
            case "refresh":
                return await strategy.refresh_token(args.refresh_token)
            case "me":
                return await strategy.get_me(args.access_token)
            case "userinfo":
                return await strategy.get_user_info(args.access_token, args.open_id)
            case _:
                raise ValueError(f"Unknown command: {args.command}")


def _to_output(result: Any) -> str:
    if dataclasses.is_dataclass(result):
        result = dataclasses.asdict(result)
    return orjson_dumps(result)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except ProviderError as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        if e.result is not None:
            print(_to_output(e.result))
        return 1
    except (SocialiteError, ValueError, OSError) as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        return 1

    print(_to_output(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
