"""项目清单 (forgekit.yml) 读写

清单结构:
    name: demo
    version: 0.1.0
    description: ...
    authors: [...]
    dependencies:
      - {name: forgekit-http, version: 0.1.0, source: registry}
    build:
      target: ledokoz
      opt_level: "2"
      flags: []
      output_dir: target

依赖名在清单内唯一：add_dependency() 遇到重名直接报 ConflictError，
set_dependency() 则原地覆盖版本（供安装流程使用）。
CLI 与 HTTP 的 add 都经 PackageManager 走 set_dependency()，重复添加不会返回 Conflict。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from forgekit.core.exceptions import (
    ConflictError,
    InvalidDataError,
    NotFoundError,
    StorageError,
)
from forgekit.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)

MANIFEST_FILE = "forgekit.yml"
REGISTRY_SOURCE = "registry"


@dataclass
class ManifestDependency:
    """清单中声明的单个依赖"""

    name: str
    version: str
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.source is not None:
            data["source"] = self.source
        return data


@dataclass
class BuildSettings:
    target: str = "ledokoz"
    opt_level: str = "2"
    flags: list[str] = field(default_factory=list)
    output_dir: str = "target"


@dataclass
class ProjectManifest:
    """项目清单"""

    name: str
    version: str
    description: str | None = None
    authors: list[str] = field(default_factory=list)
    dependencies: list[ManifestDependency] = field(default_factory=list)
    build: BuildSettings = field(default_factory=BuildSettings)

    def get_dependency(self, name: str) -> ManifestDependency | None:
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        return None

    def add_dependency(self, dep: ManifestDependency) -> None:
        """追加依赖，重名时报冲突且不修改清单"""
        if self.get_dependency(dep.name) is not None:
            raise ConflictError(f"依赖已存在: {dep.name}")
        self.dependencies.append(dep)

    def set_dependency(
        self, name: str, version: str, source: str = REGISTRY_SOURCE,
    ) -> ManifestDependency:
        """已存在则原地覆盖版本，否则追加新依赖（source 标记为 registry）"""
        existing = self.get_dependency(name)
        if existing is not None:
            existing.version = version
            return existing
        dep = ManifestDependency(name=name, version=version, source=source)
        self.dependencies.append(dep)
        return dep

    def remove_dependency(self, name: str) -> bool:
        """按名称移除依赖，不存在时返回 False"""
        before = len(self.dependencies)
        self.dependencies = [d for d in self.dependencies if d.name != name]
        return len(self.dependencies) != before

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.description is not None:
            data["description"] = self.description
        data["authors"] = list(self.authors)
        data["dependencies"] = [d.to_dict() for d in self.dependencies]
        data["build"] = asdict(self.build)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], origin: str = "") -> ProjectManifest:
        label = f" ({origin})" if origin else ""
        required: dict[str, str] = {}
        for key in ("name", "version"):
            value = data.get(key)
            if value is None or value == "":
                raise InvalidDataError(f"清单缺少字段 '{key}'{label}")
            # 手写的 version: 1.0 会被 YAML 解析成数字
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(value)
            if not isinstance(value, str):
                raise InvalidDataError(
                    f"清单字段 '{key}' 必须是字符串{label}: {value!r}"
                )
            required[key] = value

        deps: list[ManifestDependency] = []
        seen: set[str] = set()
        for raw in data.get("dependencies") or []:
            if not isinstance(raw, dict) or not raw.get("name") or "version" not in raw:
                raise InvalidDataError(f"依赖条目无效{label}: {raw!r}")
            name = str(raw["name"])
            if name in seen:
                raise InvalidDataError(f"清单中依赖重复{label}: {name}")
            seen.add(name)
            source = raw.get("source")
            deps.append(ManifestDependency(
                name=name,
                version=str(raw["version"]),
                source=str(source) if source is not None else None,
            ))

        build_raw = data.get("build") or {}
        if not isinstance(build_raw, dict):
            raise InvalidDataError(f"build 段必须是映射{label}")
        build = BuildSettings(
            target=str(build_raw.get("target", "ledokoz")),
            opt_level=str(build_raw.get("opt_level", "2")),
            flags=[str(f) for f in build_raw.get("flags") or []],
            output_dir=str(build_raw.get("output_dir", "target")),
        )

        return cls(
            name=required["name"],
            version=required["version"],
            description=data.get("description"),
            authors=[str(a) for a in data.get("authors") or []],
            dependencies=deps,
            build=build,
        )


class ManifestStore:
    """清单文件读写"""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    @classmethod
    def for_project(cls, project_root: Path) -> ManifestStore:
        return cls(Path(project_root) / MANIFEST_FILE)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> ProjectManifest:
        if not self.path.is_file():
            raise NotFoundError(f"项目清单不存在: {self.path}")
        try:
            data = load_yaml(self.path)
        except yaml.YAMLError as e:
            raise InvalidDataError(f"清单格式错误: {self.path} - {e}") from e
        except ValueError as e:
            raise InvalidDataError(str(e)) from e
        except OSError as e:
            raise StorageError(f"读取清单失败: {self.path} - {e}") from e
        if not data:
            raise InvalidDataError(f"清单为空或不是映射: {self.path}")
        return ProjectManifest.from_dict(data, origin=str(self.path))

    def save(self, manifest: ProjectManifest) -> None:
        try:
            save_yaml(self.path, manifest.to_dict())
        except OSError as e:
            raise StorageError(f"写入清单失败: {self.path} - {e}") from e
        logger.debug("清单已保存: %s", self.path)

    def init(self, name: str, version: str = "0.1.0") -> ProjectManifest:
        """创建默认清单，已存在时报冲突"""
        if self.exists():
            raise ConflictError(f"项目清单已存在: {self.path}")
        manifest = ProjectManifest(name=name, version=version)
        self.save(manifest)
        logger.info("已创建项目清单: %s", self.path)
        return manifest
