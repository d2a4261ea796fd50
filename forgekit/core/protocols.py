"""领域协议定义

远端注册表、构建产物缓存等接缝处的接口契约（Protocol），
实现类在构造时注入，上层只依赖协议。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from forgekit.core.registry.models import IndexEntry, PackageMetadata


# =========================================================================
# 远端注册表协议
# =========================================================================

class RemoteRegistry(Protocol):
    """远端包查询服务

    RegistryClient 在本地索引未命中时回退到这里。
    """

    def search(self, query: str, limit: int) -> list[PackageMetadata]:
        """全文搜索，最多返回 limit 条"""
        ...

    def get_info(self, name: str, version: str) -> PackageMetadata:
        """按名称+版本获取发布信息，不存在时抛 NotFoundError"""
        ...

    def archive_url(self, name: str, version: str) -> str:
        """推导确定性的归档下载地址"""
        ...

    def fetch_archive(self, url: str) -> bytes:
        """下载归档原始字节"""
        ...

    def fetch_index(self) -> dict[str, IndexEntry]:
        """获取完整的包索引快照"""
        ...


# =========================================================================
# 产物缓存协议
# =========================================================================

class ArtifactStore(Protocol):
    """键值二进制产物缓存（构建流水线按黑盒使用）"""

    def get(self, key: str) -> bytes | None:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def invalidate(self, pattern: str) -> int:
        ...
