"""注册表客户端

职责:
- 搜索 / 查询 / 下载包（本地索引优先 + 远端回退）
- 归档缓存: cache_dir/{name}-{version}.tar.gz，文件存在即命中，不做校验或过期检查
- 刷新本地索引

同一 (name, version) 的并发下载不去重：两个调用方都会下载并写入同一路径，
后写入者覆盖先写入者，内容相同。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from forgekit.core.exceptions import NotFoundError, StorageError
from forgekit.core.protocols import RemoteRegistry
from forgekit.core.registry.index import RegistryIndex
from forgekit.core.registry.models import IndexEntry, PackageMetadata, VersionInfo
from forgekit.core.registry.resolver import DependencyResolver
from forgekit.utils.paths import check_name, check_version, ensure_within
from forgekit.utils.yaml_io import atomic_write_bytes

logger = logging.getLogger(__name__)

ARCHIVE_EXT = ".tar.gz"
DEFAULT_SEARCH_LIMIT = 20


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"无法创建目录: {path} - {e}") from e


class RegistryClient:
    """包查找、拉取、缓存的统一入口"""

    def __init__(
        self,
        index: RegistryIndex,
        remote: RemoteRegistry,
        cache_dir: Path,
        resolver: DependencyResolver | None = None,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self.index = index
        self.remote = remote
        self.cache_dir = Path(cache_dir)
        self.resolver = resolver or DependencyResolver()
        self.search_limit = search_limit
        _ensure_dir(self.cache_dir)
        _ensure_dir(self.index.index_dir)

    def archive_path(self, name: str, version: str) -> Path:
        """{name}-{version}.tar.gz，包名与版本号非法时抛 ValidationError"""
        check_name(name)
        check_version(version)
        return ensure_within(self.cache_dir, self.cache_dir / f"{name}-{version}{ARCHIVE_EXT}")

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def search_packages(self, query: str) -> list[PackageMetadata]:
        """本地索引有结果则直接返回，否则远端搜索（结果不回写索引）"""
        local = self.index.search(query)
        if local:
            return local
        logger.info("本地索引无匹配，远端搜索: %s", query)
        return self.remote.search(query, self.search_limit)[: self.search_limit]

    def _local_version(self, name: str, version: str) -> tuple[IndexEntry, VersionInfo] | None:
        """本地索引精确查找；未命中属于正常回退分支，不是错误"""
        entry = self.index.get_entry(name)
        if entry is None:
            return None
        try:
            return entry, self.resolver.resolve(entry, version)
        except NotFoundError:
            return None

    def get_package_info(self, name: str, version: str) -> PackageMetadata:
        """本地索引精确命中则直接返回，否则请求远端；两处都没有时抛 NotFoundError"""
        hit = self._local_version(name, version)
        if hit is not None:
            return self.index.metadata_for(*hit)
        logger.info("本地索引未命中，远端查询: %s@%s", name, version)
        return self.remote.get_info(name, version)

    def list_packages(self) -> list[str]:
        return self.index.list_packages()

    # ------------------------------------------------------------------
    # 下载
    # ------------------------------------------------------------------

    def download_package(self, name: str, version: str) -> Path:
        """返回归档的本地路径，缓存命中时不访问网络"""
        cache_path = self.archive_path(name, version)
        if cache_path.exists():
            logger.info("归档缓存命中: %s", cache_path)
            return cache_path

        self.get_package_info(name, version)

        hit = self._local_version(name, version)
        if hit is not None and hit[1].archive_url:
            url = hit[1].archive_url
        else:
            url = self.remote.archive_url(name, version)

        data = self.remote.fetch_archive(url)
        try:
            atomic_write_bytes(cache_path, data)
        except OSError as e:
            raise StorageError(f"写入归档缓存失败: {cache_path} - {e}") from e
        logger.info("已缓存: %s@%s -> %s (%d 字节)", name, version, cache_path, len(data))
        return cache_path

    def list_cached_archives(self) -> list[str]:
        if not self.cache_dir.exists():
            return []
        return sorted(
            p.name for p in self.cache_dir.iterdir()
            if p.is_file() and p.name.endswith(ARCHIVE_EXT)
        )

    def clean_archive_cache(self) -> None:
        """清空并重建归档缓存目录"""
        try:
            if self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"清理归档缓存失败: {self.cache_dir} - {e}") from e
        logger.info("归档缓存已清空: %s", self.cache_dir)

    # ------------------------------------------------------------------
    # 索引
    # ------------------------------------------------------------------

    def update_index(self) -> None:
        entries = self.remote.fetch_index()
        self.index.refresh(entries)
