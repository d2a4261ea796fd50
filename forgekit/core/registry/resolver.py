"""依赖版本解析器

默认策略为精确字符串匹配："1.2" 不会匹配 "1.2.0"。
需要更丰富的匹配规则时实现 VersionPolicy 并在构造时传入。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from forgekit.core.exceptions import NotFoundError
from forgekit.core.registry.models import IndexEntry, ResolvedDependency, VersionInfo

if TYPE_CHECKING:
    from forgekit.core.manifest import ManifestDependency
    from forgekit.core.registry.index import RegistryIndex

logger = logging.getLogger(__name__)


class VersionPolicy(Protocol):
    """版本选择策略协议"""

    def select(self, entry: IndexEntry, requirement: str) -> VersionInfo | None:
        ...


class ExactVersionPolicy:
    """精确匹配版本字符串"""

    def select(self, entry: IndexEntry, requirement: str) -> VersionInfo | None:
        return entry.versions.get(requirement)


class DependencyResolver:
    """把版本需求映射到一个具体的 VersionInfo"""

    def __init__(self, policy: VersionPolicy | None = None) -> None:
        self.policy = policy or ExactVersionPolicy()

    def resolve(self, entry: IndexEntry, requirement: str) -> VersionInfo:
        info = self.policy.select(entry, requirement)
        if info is None:
            raise NotFoundError(
                f"包 '{entry.name}' 没有版本 {requirement}。"
                f"可用: {sorted(entry.versions)}"
            )
        return info

    def resolve_all(
        self,
        dependencies: Iterable[ManifestDependency],
        index: RegistryIndex,
    ) -> list[ResolvedDependency]:
        """按索引逐个解析清单依赖（不处理传递依赖）"""
        resolved = []
        for dep in dependencies:
            entry = index.get_entry(dep.name)
            if entry is None:
                raise NotFoundError(f"索引中没有包: {dep.name}")
            info = self.resolve(entry, dep.version)
            resolved.append(ResolvedDependency(
                name=dep.name, version=info.version, download_url=info.archive_url,
            ))
        logger.debug("已解析 %d 个依赖", len(resolved))
        return resolved
