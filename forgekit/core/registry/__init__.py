"""包注册表模块

拆分说明:
- models.py: 数据模型
- index.py: 本地索引 packages.json
- resolver.py: 版本解析（精确匹配）
- remote.py: GitHub 远端实现
- client.py: 本地优先 + 远端回退 + 归档缓存
"""

from forgekit.core.registry.client import RegistryClient
from forgekit.core.registry.index import RegistryIndex
from forgekit.core.registry.models import (
    DependencySpec,
    IndexEntry,
    PackageMetadata,
    ResolvedDependency,
    VersionInfo,
)
from forgekit.core.registry.remote import GitHubRegistry
from forgekit.core.registry.resolver import (
    DependencyResolver,
    ExactVersionPolicy,
    VersionPolicy,
)

__all__ = [
    "DependencyResolver",
    "DependencySpec",
    "ExactVersionPolicy",
    "GitHubRegistry",
    "IndexEntry",
    "PackageMetadata",
    "RegistryClient",
    "RegistryIndex",
    "ResolvedDependency",
    "VersionInfo",
    "VersionPolicy",
]
