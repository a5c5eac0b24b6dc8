"""
配置文件读取：按扩展名分派到 JSON / YAML / TOML / dotenv 解析器，统一返回扁平 dict。
"""

import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeAlias

import yaml
from dotenv import dotenv_values

from socialite.toolkit.json import orjson_loads

Loader: TypeAlias = Callable[[Path, str], dict[str, Any]]


def _as_mapping(data: Any) -> dict[str, Any]:
    # 空文件或顶层不是对象时视为空配置
    return data if isinstance(data, dict) else {}


def _read_json(path: Path, encoding: str) -> dict[str, Any]:
    return _as_mapping(orjson_loads(path.read_text(encoding=encoding)))


def _read_yaml(path: Path, encoding: str) -> dict[str, Any]:
    return _as_mapping(yaml.safe_load(path.read_text(encoding=encoding)))


def _read_toml(path: Path, encoding: str) -> dict[str, Any]:
    return tomllib.loads(path.read_text(encoding=encoding))


def _read_env(path: Path, encoding: str) -> dict[str, Any]:
    # 只有键没有 "=" 的行，dotenv 解析为 None，丢弃
    return {k: v for k, v in dotenv_values(path, encoding=encoding).items() if v is not None}


class ConfigLoader:
    """配置文件加载器，按扩展名选择解析器"""

    _loaders: dict[str, Loader] = {
        ".json": _read_json,
        ".yaml": _read_yaml,
        ".yml": _read_yaml,
        ".toml": _read_toml,
        ".env": _read_env,
    }

    @staticmethod
    def _suffix_of(path: Path) -> str:
        # ".env" / ".env.local" 这类隐藏文件按 dotenv 处理
        if path.name.startswith(".env") or (path.name.startswith(".") and not path.suffix):
            return ".env"
        return path.suffix.lower()

    @classmethod
    def load(cls, file_path: str | Path, encoding: str = "utf-8") -> dict[str, Any]:
        """
        读取配置文件

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 不支持的文件格式
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"配置文件不存在: {path}")

        suffix = cls._suffix_of(path)
        loader = cls._loaders.get(suffix)
        if loader is None:
            raise ValueError(f"不支持的配置文件格式: {suffix or path.name}")

        return loader(path, encoding)


def load_config(file_path: str | Path, encoding: str = "utf-8") -> dict[str, Any]:
    return ConfigLoader.load(file_path, encoding)
