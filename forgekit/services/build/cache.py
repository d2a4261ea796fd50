"""构建产物缓存

职责:
- 以字符串为键缓存任意字节内容（编译产物、中间结果）
- 内存工作集 + 磁盘文件 {key}.cache 持久化
- 命中/未命中统计
- 按 glob 模式批量失效

缓存策略:
  - set() 先同步写磁盘再写内存
  - get() 先查内存，未命中再查磁盘并载入内存
  - 没有按大小/时间的自动淘汰，只能通过 invalidate()/clear() 移除
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from forgekit.core.exceptions import StorageError, ValidationError
from forgekit.utils.yaml_io import atomic_write_bytes

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".cache"


@dataclass(frozen=True)
class CacheStats:
    """缓存统计快照"""

    item_count: int = 0
    total_size: int = 0
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """把简化 glob 转为正则，调用方用 fullmatch() 做整串匹配

    "." 为字面点，"*" 匹配任意长度，"?" 匹配单个字符，其余字符原样进入正则。
    无法编译的模式退化为匹配全部键。
    """
    translated = pattern.replace(".", r"\.").replace("*", ".*").replace("?", ".")
    try:
        return re.compile(translated, re.DOTALL)
    except re.error as e:
        logger.warning("无效的失效模式 %r (%s)，按全部匹配处理", pattern, e)
        return re.compile(".*", re.DOTALL)


def _check_key(key: str) -> None:
    if not key or key in (".", "..") or "/" in key or "\\" in key:
        raise ValidationError(f"无效的缓存键: {key!r}")


class BuildArtifactCache:
    """构建产物缓存管理器"""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"无法创建缓存目录: {self.cache_dir} - {e}") from e
        self._data: dict[str, bytes] = {}
        self._hits = 0
        self._misses = 0

    def _file(self, key: str) -> Path:
        return self.cache_dir / f"{key}{CACHE_SUFFIX}"

    def _disk_keys(self) -> list[tuple[str, Path]]:
        if not self.cache_dir.exists():
            return []
        return [
            (p.name[: -len(CACHE_SUFFIX)], p)
            for p in self.cache_dir.iterdir()
            if p.is_file() and p.name.endswith(CACHE_SUFFIX)
        ]

    # ------------------------------------------------------------------
    # 读写
    # ------------------------------------------------------------------

    def get(self, key: str) -> bytes | None:
        """读取缓存，每次调用恰好计一次命中或未命中"""
        _check_key(key)
        data = self._data.get(key)
        if data is not None:
            self._hits += 1
            return data

        path = self._file(key)
        if path.is_file():
            try:
                data = path.read_bytes()
            except OSError as e:
                self._misses += 1
                raise StorageError(f"读取缓存文件失败: {path} - {e}") from e
            self._data[key] = data
            self._hits += 1
            logger.debug("从磁盘载入缓存: %s", key)
            return data

        self._misses += 1
        return None

    def set(self, key: str, value: bytes) -> None:
        """同步写入磁盘后更新内存，不影响命中统计"""
        _check_key(key)
        path = self._file(key)
        try:
            atomic_write_bytes(path, bytes(value))
        except OSError as e:
            raise StorageError(f"写入缓存文件失败: {path} - {e}") from e
        self._data[key] = bytes(value)

    def contains(self, key: str) -> bool:
        """检查键是否存在（内存或磁盘），不计入统计"""
        _check_key(key)
        return key in self._data or self._file(key).is_file()

    def keys(self) -> list[str]:
        """内存与磁盘中全部键"""
        return sorted(set(self._data) | {k for k, _ in self._disk_keys()})

    # ------------------------------------------------------------------
    # 失效
    # ------------------------------------------------------------------

    def invalidate(self, pattern: str) -> int:
        """删除内存和磁盘中整串匹配 pattern 的键，返回删除的键数"""
        regex = glob_to_regex(pattern)
        removed = {k for k in self._data if regex.fullmatch(k)}
        for k in removed:
            del self._data[k]

        for key, path in self._disk_keys():
            if not regex.fullmatch(key):
                continue
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise StorageError(f"删除缓存文件失败: {path} - {e}") from e
            removed.add(key)

        logger.info("缓存失效: pattern=%s, 删除 %d 项", pattern, len(removed))
        return len(removed)

    def clear(self) -> None:
        """清空内存并删除重建缓存目录"""
        self._data.clear()
        try:
            if self.cache_dir.exists():
                shutil.rmtree(self.cache_dir)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"清空缓存目录失败: {self.cache_dir} - {e}") from e
        logger.info("缓存已清空: %s", self.cache_dir)

    # ------------------------------------------------------------------
    # 统计与预热
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        """只统计内存中的条目，尚未载入的磁盘文件不计入 total_size"""
        total = self._hits + self._misses
        return CacheStats(
            item_count=len(self._data),
            total_size=sum(len(v) for v in self._data.values()),
            hits=self._hits,
            misses=self._misses,
            hit_rate=self._hits / total if total else 0.0,
        )

    def load_from_disk(self) -> int:
        """把磁盘上全部 *.cache 文件载入内存，不影响命中统计"""
        loaded = 0
        for key, path in self._disk_keys():
            try:
                self._data[key] = path.read_bytes()
            except OSError as e:
                raise StorageError(f"读取缓存文件失败: {path} - {e}") from e
            loaded += 1
        logger.info("已从磁盘预热缓存: %d 项", loaded)
        return loaded
