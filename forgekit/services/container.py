"""服务容器 - 统一依赖注入

所有核心组件通过容器获取，同一容器内的实例共享状态（索引、产物缓存统计等）。
CLI 和 Web 层均通过 get_container() 获取，而非直接构造。

依赖关系图（→ 表示依赖）:
  packages → registry → index, remote, resolver
  artifacts 独立

用法:
    container = ServiceContainer(config=Config.from_env())
    container.registry.search_packages("http")
    container.packages.add_dependency("forgekit-http", "0.1.0")
    container.artifacts.stats()
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forgekit.core.config import Config
    from forgekit.core.package_manager import PackageManager
    from forgekit.core.protocols import RemoteRegistry
    from forgekit.core.registry import DependencyResolver, RegistryClient, RegistryIndex
    from forgekit.services.build.cache import BuildArtifactCache

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器

    remote 可显式传入以替换默认的 GitHubRegistry（测试或私有注册表）。
    """

    def __init__(
        self,
        config: Config | None = None,
        remote: RemoteRegistry | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from forgekit.core.config import get_config
            config = get_config()
        self._config = config
        if remote is not None:
            self._instances["remote"] = remote

    @property
    def config(self) -> Config:
        return self._config

    # ---- 注册表 ----

    @property
    def remote(self) -> RemoteRegistry:
        if "remote" not in self._instances:
            from forgekit.core.registry.remote import GitHubRegistry
            self._instances["remote"] = GitHubRegistry(
                api_url=self._config.api_url,
                base_url=self._config.base_url,
                token=self._config.github_token,
                timeout=self._config.http_timeout,
                index_url=self._config.index_url,
            )
        return self._instances["remote"]  # type: ignore[return-value]

    @property
    def index(self) -> RegistryIndex:
        if "index" not in self._instances:
            from forgekit.core.registry.index import RegistryIndex
            self._instances["index"] = RegistryIndex(
                index_dir=Path(self._config.index_dir),
                base_url=self._config.base_url,
            )
        return self._instances["index"]  # type: ignore[return-value]

    @property
    def resolver(self) -> DependencyResolver:
        if "resolver" not in self._instances:
            from forgekit.core.registry.resolver import DependencyResolver
            self._instances["resolver"] = DependencyResolver()
        return self._instances["resolver"]  # type: ignore[return-value]

    @property
    def registry(self) -> RegistryClient:
        if "registry" not in self._instances:
            from forgekit.core.registry.client import RegistryClient
            self._instances["registry"] = RegistryClient(
                index=self.index,
                remote=self.remote,
                cache_dir=Path(self._config.cache_dir),
                resolver=self.resolver,
                search_limit=self._config.search_limit,
            )
        return self._instances["registry"]  # type: ignore[return-value]

    # ---- 项目 ----

    @property
    def packages(self) -> PackageManager:
        """当前配置 project_root 对应的包管理器"""
        if "packages" not in self._instances:
            self._instances["packages"] = self.packages_for(self._config.project_root)
        return self._instances["packages"]  # type: ignore[return-value]

    def packages_for(self, project_root: str | Path) -> PackageManager:
        from forgekit.core.package_manager import PackageManager
        return PackageManager(
            project_root=Path(project_root),
            client=self.registry,
            resolver=self.resolver,
            extract_archives=self._config.extract_archives,
        )

    # ---- 构建产物缓存 ----

    @property
    def artifacts(self) -> BuildArtifactCache:
        if "artifacts" not in self._instances:
            from forgekit.services.build.cache import BuildArtifactCache
            self._instances["artifacts"] = BuildArtifactCache(
                cache_dir=Path(self._config.artifact_dir),
            )
        return self._instances["artifacts"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def set_container(container: ServiceContainer) -> None:
    """替换全局容器（Web 启动或测试注入）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = container


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
