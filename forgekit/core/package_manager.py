"""项目依赖包管理器

保持项目清单 (forgekit.yml) 与 vendor/ 安装目录一致。

安装布局:
  vendor/{name}-{version}/package.tar.gz     原始归档副本
  vendor/{name}-{version}/src/__init__.py    生成的入口文件
移除时删除的是 vendor/{name}/，两种命名约定分别由不同操作使用。

add_dependency() 严格按 下载 → 安装 → 写清单 顺序执行，不做回滚：
中途失败时已下载的归档保留在缓存中，vendor 目录可能残留部分文件，
重新执行同一操作即可收敛。

用法:
    from forgekit.services.container import get_container

    pm = get_container().packages
    pm.add_dependency("forgekit-http", "0.1.0")
    pm.list_installed()
"""

from __future__ import annotations

import logging
import shutil
import tarfile
from pathlib import Path

from forgekit.core.exceptions import ArchiveError, StorageError
from forgekit.core.manifest import ManifestStore
from forgekit.core.registry.client import RegistryClient
from forgekit.core.registry.models import ResolvedDependency
from forgekit.core.registry.resolver import DependencyResolver
from forgekit.utils.paths import check_name, check_version, ensure_within

logger = logging.getLogger(__name__)

VENDOR_DIR = "vendor"
ARCHIVE_COPY = "package.tar.gz"

ENTRY_POINT_TEMPLATE = '''"""Auto-generated entry point for {name} {version}"""


def hello() -> str:
    return "Hello from {name}!"
'''


class PackageManager:
    """单个项目的依赖包管理器"""

    def __init__(
        self,
        project_root: Path,
        client: RegistryClient,
        resolver: DependencyResolver | None = None,
        extract_archives: bool = False,
    ) -> None:
        self.project_root = Path(project_root)
        self.client = client
        self.resolver = resolver or client.resolver
        self.extract_archives = extract_archives
        self.store = ManifestStore.for_project(self.project_root)

    @property
    def vendor_dir(self) -> Path:
        return self.project_root / VENDOR_DIR

    def install_path(self, name: str, version: str) -> Path:
        check_name(name)
        check_version(version)
        return ensure_within(self.vendor_dir, self.vendor_dir / f"{name}-{version}")

    # ------------------------------------------------------------------
    # 增删改
    # ------------------------------------------------------------------

    def add_dependency(self, name: str, version: str) -> Path:
        """下载、安装并写入清单；已存在的依赖会被原地更新版本"""
        check_name(name)
        check_version(version)
        logger.info("添加依赖: %s@%s", name, version)
        archive = self.client.download_package(name, version)
        target = self._install(name, version, archive)

        manifest = self.store.load()
        manifest.set_dependency(name, version)
        self.store.save(manifest)

        logger.info("已添加 %s@%s -> %s", name, version, target)
        return target

    def remove_dependency(self, name: str) -> bool:
        """从清单移除并删除 vendor/{name}/；依赖不存在时不报错"""
        check_name(name)
        manifest = self.store.load()
        removed = manifest.remove_dependency(name)
        self.store.save(manifest)

        target = ensure_within(self.vendor_dir, self.vendor_dir / name)
        if target.exists():
            try:
                shutil.rmtree(target)
            except OSError as e:
                raise StorageError(f"删除安装目录失败: {target} - {e}") from e
            logger.info("已删除安装目录: %s", target)

        if removed:
            logger.info("已移除依赖: %s", name)
        else:
            logger.info("清单中没有依赖 %s，跳过", name)
        return removed

    def update_dependencies(self) -> list[str]:
        """按清单中记录的版本逐个重新安装（原地刷新，不做版本升级）"""
        manifest = self.store.load()
        updated = []
        for dep in manifest.dependencies:
            logger.info("更新 %s...", dep.name)
            self.add_dependency(dep.name, dep.version)
            updated.append(dep.name)
        logger.info("依赖更新完成: %d 个", len(updated))
        return updated

    # ------------------------------------------------------------------
    # 安装
    # ------------------------------------------------------------------

    def _install(self, name: str, version: str, archive: Path) -> Path:
        target = self.install_path(name, version)
        try:
            target.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(archive, target / ARCHIVE_COPY)
            src_dir = target / "src"
            src_dir.mkdir(exist_ok=True)
            (src_dir / "__init__.py").write_text(
                ENTRY_POINT_TEMPLATE.format(name=name, version=version),
                encoding="utf-8",
            )
        except OSError as e:
            raise StorageError(f"安装失败: {name}@{version} -> {target} - {e}") from e

        if self.extract_archives:
            self._extract(archive, target)

        logger.info("已安装到: %s", target)
        return target

    @staticmethod
    def _extract(archive: Path, target: Path) -> None:
        try:
            with tarfile.open(archive) as tf:
                tf.extractall(path=str(target), filter="data")  # noqa: S202
        except tarfile.TarError as e:
            raise ArchiveError(f"归档无法解压: {archive} - {e}") from e
        except OSError as e:
            raise StorageError(f"解压写入失败: {target} - {e}") from e

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_installed(self) -> list[str]:
        if not self.vendor_dir.exists():
            return []
        return sorted(p.name for p in self.vendor_dir.iterdir() if p.is_dir())

    def search_packages(self, query: str) -> list[str]:
        return [
            f"{pkg.name} - {pkg.description}"
            for pkg in self.client.search_packages(query)
        ]

    def package_info(self, name: str, version: str) -> str:
        info = self.client.get_package_info(name, version)
        return (
            f"Package: {info.name}\n"
            f"Version: {info.version}\n"
            f"Description: {info.description}\n"
            f"Repository: {info.repository}\n"
            f"License: {info.license}"
        )

    def check_dependencies(self) -> list[ResolvedDependency]:
        """按本地索引解析清单中全部依赖，任一缺失即抛 NotFoundError"""
        manifest = self.store.load()
        return self.resolver.resolve_all(manifest.dependencies, self.client.index)

    def update_registry(self) -> None:
        logger.info("更新包索引...")
        self.client.update_index()
