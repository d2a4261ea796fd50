"""集中配置管理

归档缓存、索引、构建产物缓存等目录统一由 Config 提供，
核心组件通过构造参数接收配置，不在内部读取环境变量。
平台默认目录只在入口处（CLI / Web 启动）由 from_env() 计算一次。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from forgekit.core.exceptions import ConfigError
from forgekit.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

APP_NAME = "forgekit"


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = ".forgekit/cache"
    index_dir: str = ".forgekit/index"
    artifact_dir: str = ".forgekit/artifacts"
    project_root: str = "."

    # 远端注册表
    base_url: str = "https://github.com"
    api_url: str = "https://api.github.com"
    index_url: str = ""
    github_token: str = ""
    http_timeout: float = 60.0
    search_limit: int = 20

    # 安装
    extract_archives: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "forgekit.config.yml", base: Config | None = None) -> Config:
        """从 YAML 文件加载配置，不存在则返回 base（或默认值）"""
        try:
            data = load_yaml(path)
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件格式错误: {path} - {e}") from e
        except ValueError as e:
            raise ConfigError(str(e)) from e
        except OSError as e:
            raise ConfigError(f"读取配置文件失败: {path} - {e}") from e
        base_values = base.to_dict() if base is not None else {}
        base_values.pop("extra", None)
        if not data:
            return cls(**base_values)
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**{**base_values, **matched})
        cfg.extra = extra
        return cfg

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Config:
        """根据 XDG 目录约定与环境变量计算默认配置"""
        env = os.environ if environ is None else environ
        home = Path(env.get("HOME", "~")).expanduser()
        cache_home = Path(env.get("XDG_CACHE_HOME") or home / ".cache")
        data_home = Path(env.get("XDG_DATA_HOME") or home / ".local" / "share")
        return cls(
            cache_dir=str(cache_home / APP_NAME / "cache"),
            index_dir=str(data_home / APP_NAME / "index"),
            artifact_dir=str(cache_home / APP_NAME / "artifacts"),
            github_token=env.get("FORGEKIT_GITHUB_TOKEN", ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "forgekit.config.yml") -> Config:
    """以环境默认值为基础，叠加配置文件，初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path, base=Config.from_env())
    logger.info("配置已加载: %s", path)
    return _current
