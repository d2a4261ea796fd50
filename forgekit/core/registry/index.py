"""本地包索引

职责:
- 读写 index_dir/packages.json（包名 → IndexEntry）
- 按子串搜索、按名称+版本精确查找
- refresh() 以新快照整体替换索引（不做增量合并）
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from forgekit.core.exceptions import InvalidDataError, StorageError
from forgekit.core.registry.models import IndexEntry, PackageMetadata, VersionInfo
from forgekit.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)

INDEX_FILE = "packages.json"


class RegistryIndex:
    """包索引 - 内存映射 + 单个 JSON 文件持久化"""

    def __init__(self, index_dir: Path, base_url: str = "https://github.com") -> None:
        self.index_dir = Path(index_dir)
        self.base_url = base_url.rstrip("/")
        self._entries: dict[str, IndexEntry] | None = None

    @property
    def path(self) -> Path:
        return self.index_dir / INDEX_FILE

    # ------------------------------------------------------------------
    # 读写
    # ------------------------------------------------------------------

    def load(self) -> dict[str, IndexEntry]:
        """从磁盘重新加载索引，文件不存在视为空索引"""
        if not self.path.is_file():
            self._entries = {}
            return self._entries
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidDataError(f"索引文件格式错误: {self.path} - {e}") from e
        except OSError as e:
            raise StorageError(f"读取索引失败: {self.path} - {e}") from e
        self._entries = self._parse(raw)
        logger.debug("已加载索引: %d 个包", len(self._entries))
        return self._entries

    def save(self) -> None:
        payload = {name: e.to_dict() for name, e in self._ensure_loaded().items()}
        try:
            atomic_write(self.path, json.dumps(payload, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StorageError(f"写入索引失败: {self.path} - {e}") from e

    def refresh(self, entries: dict[str, IndexEntry]) -> None:
        """用新快照整体覆盖索引（后写者覆盖先写者）"""
        self._entries = dict(entries)
        self.save()
        logger.info("索引已刷新: %d 个包 -> %s", len(self._entries), self.path)

    def _ensure_loaded(self) -> dict[str, IndexEntry]:
        if self._entries is None:
            return self.load()
        return self._entries

    @staticmethod
    def _parse(raw: object) -> dict[str, IndexEntry]:
        if not isinstance(raw, dict):
            raise InvalidDataError("索引文档顶层必须是 JSON 对象")
        return {str(name): IndexEntry.from_dict(str(name), data) for name, data in raw.items()}

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def search(self, query: str) -> list[PackageMetadata]:
        """包名或任一版本号包含 query（区分大小写）的包，返回其 latest 版本"""
        results = []
        for name, entry in self._ensure_loaded().items():
            if query in name or any(query in v.version for v in entry.versions.values()):
                results.append(self._to_metadata(entry, entry.latest, entry.latest_info()))
        return results

    def get(self, name: str, version: str) -> PackageMetadata | None:
        entry = self.get_entry(name)
        if entry is None:
            return None
        info = entry.versions.get(version)
        if info is None:
            return None
        return self._to_metadata(entry, version, info)

    def get_entry(self, name: str) -> IndexEntry | None:
        return self._ensure_loaded().get(name)

    def list_packages(self) -> list[str]:
        return list(self._ensure_loaded())

    def metadata_for(self, entry: IndexEntry, info: VersionInfo) -> PackageMetadata:
        return self._to_metadata(entry, info.version, info)

    def _to_metadata(
        self, entry: IndexEntry, version: str, info: VersionInfo | None,
    ) -> PackageMetadata:
        return PackageMetadata(
            name=entry.name,
            version=version,
            description=f"Package {entry.name}",
            repository=f"{self.base_url}/{entry.name}",
            release_date=info.published if info else "",
        )
