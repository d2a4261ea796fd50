"""注册表数据模型

数据类:
- PackageMetadata: 解析后的包发布信息（不单独持久化）
- DependencySpec: 包元信息中携带的依赖声明
- VersionInfo: 单个发布版本
- IndexEntry: 本地索引中某个包的全部版本
- ResolvedDependency: 清单依赖按索引解析后的结果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from forgekit.core.exceptions import InvalidDataError

DEFAULT_TARGET = "ledokoz"
DEFAULT_LICENSE = "MIT"


@dataclass(frozen=True)
class DependencySpec:
    name: str
    version: str
    optional: bool = False
    dev: bool = False


@dataclass(frozen=True)
class PackageMetadata:
    """单个包发布的元信息"""

    name: str
    version: str
    description: str = ""
    authors: list[str] = field(default_factory=list)
    repository: str = ""
    license: str = DEFAULT_LICENSE
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    dependencies: list[DependencySpec] = field(default_factory=list)
    targets: list[str] = field(default_factory=lambda: [DEFAULT_TARGET])
    release_date: str = ""
    downloads: int = 0


@dataclass(frozen=True)
class VersionInfo:
    """单个发布版本，写入后不再修改"""

    version: str
    git_ref: str
    archive_url: str
    published: str
    checksum: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "version": self.version,
            "git_ref": self.git_ref,
            "archive_url": self.archive_url,
            "published": self.published,
            "checksum": self.checksum,
        }

    @classmethod
    def from_dict(cls, data: Any) -> VersionInfo:
        if not isinstance(data, dict) or "version" not in data:
            raise InvalidDataError(f"版本信息无效: {data!r}")
        return cls(
            version=str(data["version"]),
            git_ref=str(data.get("git_ref", "")),
            archive_url=str(data.get("archive_url", "")),
            published=str(data.get("published", "")),
            checksum=str(data.get("checksum") or ""),
        )


@dataclass
class IndexEntry:
    """本地索引中一个包的已知版本

    versions 的 key 必须与 VersionInfo.version 一致。
    """

    name: str
    versions: dict[str, VersionInfo] = field(default_factory=dict)
    latest: str = ""

    def __post_init__(self) -> None:
        for key, info in self.versions.items():
            if key != info.version:
                raise InvalidDataError(
                    f"索引条目 '{self.name}' 的版本键 {key} "
                    f"与版本号 {info.version} 不一致"
                )

    def latest_info(self) -> VersionInfo | None:
        return self.versions.get(self.latest)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "versions": {k: v.to_dict() for k, v in self.versions.items()},
            "latest": self.latest,
        }

    @classmethod
    def from_dict(cls, name: str, data: Any) -> IndexEntry:
        if not isinstance(data, dict):
            raise InvalidDataError(f"索引条目无效: {name}")
        raw_versions = data.get("versions") or {}
        if not isinstance(raw_versions, dict):
            raise InvalidDataError(f"索引条目 '{name}' 的 versions 不是映射")
        return cls(
            name=str(data.get("name", name)),
            versions={
                str(k): VersionInfo.from_dict(v) for k, v in raw_versions.items()
            },
            latest=str(data.get("latest", "")),
        )


@dataclass(frozen=True)
class ResolvedDependency:
    name: str
    version: str
    download_url: str
