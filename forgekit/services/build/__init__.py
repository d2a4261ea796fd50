"""构建服务模块

- cache.py: 构建产物缓存（内存 + 磁盘，glob 失效）
"""

from forgekit.services.build.cache import BuildArtifactCache, CacheStats, glob_to_regex

__all__ = ["BuildArtifactCache", "CacheStats", "glob_to_regex"]
