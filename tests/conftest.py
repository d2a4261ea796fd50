"""测试共享 fixture - 假远端注册表 + 临时目录下的索引/客户端/项目

FakeRemote 实现 RemoteRegistry 协议，不访问网络:
  publish()       登记一个远端可查询、可下载的版本
  search_results  远端搜索返回的列表
  index           fetch_index() 返回的快照
  calls           按顺序记录的调用，用于断言是否访问了远端
"""

from __future__ import annotations

from pathlib import Path

import pytest

from forgekit.core.exceptions import NetworkError, NotFoundError
from forgekit.core.manifest import ManifestStore
from forgekit.core.package_manager import PackageManager
from forgekit.core.registry import (
    IndexEntry,
    PackageMetadata,
    RegistryClient,
    RegistryIndex,
)


class FakeRemote:
    def __init__(self) -> None:
        self.search_results: list[PackageMetadata] = []
        self.infos: dict[tuple[str, str], PackageMetadata] = {}
        self.archives: dict[str, bytes] = {}
        self.index: dict[str, IndexEntry] = {}
        self.calls: list[tuple[str, ...]] = []

    def publish(
        self, name: str, version: str,
        data: bytes = b"archive-bytes", description: str = "",
    ) -> None:
        self.infos[(name, version)] = PackageMetadata(
            name=name, version=version, description=description or f"{name} package",
        )
        self.archives[self.archive_url(name, version)] = data

    def search(self, query: str, limit: int) -> list[PackageMetadata]:
        self.calls.append(("search", query))
        return list(self.search_results)

    def get_info(self, name: str, version: str) -> PackageMetadata:
        self.calls.append(("get_info", name, version))
        info = self.infos.get((name, version))
        if info is None:
            raise NotFoundError(f"远端资源不存在: {name}@{version}")
        return info

    def archive_url(self, name: str, version: str) -> str:
        return f"https://example.com/{name}/v{version}.tar.gz"

    def fetch_archive(self, url: str) -> bytes:
        self.calls.append(("fetch_archive", url))
        if url not in self.archives:
            raise NetworkError(f"请求失败: {url}")
        return self.archives[url]

    def fetch_index(self) -> dict[str, IndexEntry]:
        self.calls.append(("fetch_index",))
        return dict(self.index)


@pytest.fixture()
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def registry_index(tmp_path: Path) -> RegistryIndex:
    return RegistryIndex(index_dir=tmp_path / "index", base_url="https://github.com")


@pytest.fixture()
def registry_client(
    tmp_path: Path, registry_index: RegistryIndex, fake_remote: FakeRemote,
) -> RegistryClient:
    return RegistryClient(
        index=registry_index, remote=fake_remote, cache_dir=tmp_path / "archives",
    )


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    ManifestStore.for_project(root).init("demo")
    return root


@pytest.fixture()
def package_manager(project_dir: Path, registry_client: RegistryClient) -> PackageManager:
    return PackageManager(project_root=project_dir, client=registry_client)
