"""ServiceContainer 单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import forgekit.core.config as cfgmod
from forgekit.core.registry import GitHubRegistry
from forgekit.services.container import (
    ServiceContainer,
    get_container,
    reset_container,
    set_container,
)


@pytest.fixture()
def cfg(tmp_path: Path) -> cfgmod.Config:
    return cfgmod.Config(
        cache_dir=str(tmp_path / "cache"),
        index_dir=str(tmp_path / "index"),
        artifact_dir=str(tmp_path / "artifacts"),
        project_root=str(tmp_path / "project"),
        github_token="tok",
        search_limit=7,
        extract_archives=True,
    )


@pytest.fixture(autouse=True)
def _setup_config(cfg: cfgmod.Config, monkeypatch: pytest.MonkeyPatch):
    """确保测试有独立的配置和数据目录"""
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield
    reset_container()


class TestServiceContainer:
    def test_lazy_loading(self) -> None:
        c = ServiceContainer()
        assert len(c._instances) == 0
        _ = c.index
        assert "index" in c._instances
        assert "registry" not in c._instances

    def test_shared_instances(self) -> None:
        c = ServiceContainer()
        assert c.registry is c.registry
        assert c.artifacts is c.artifacts

    def test_default_remote_from_config(self) -> None:
        remote = ServiceContainer().remote
        assert isinstance(remote, GitHubRegistry)
        assert remote.token == "tok"

    def test_injected_remote(self, fake_remote) -> None:
        c = ServiceContainer(remote=fake_remote)
        assert c.remote is fake_remote
        assert c.registry.remote is fake_remote

    def test_registry_wiring(self, cfg: cfgmod.Config) -> None:
        c = ServiceContainer()
        reg = c.registry
        assert reg.index is c.index
        assert reg.resolver is c.resolver
        assert reg.cache_dir == Path(cfg.cache_dir)
        assert reg.search_limit == 7

    def test_packages_for_project(self, cfg: cfgmod.Config, tmp_path: Path) -> None:
        c = ServiceContainer()
        assert c.packages.project_root == Path(cfg.project_root)
        assert c.packages.extract_archives is True

        other = c.packages_for(tmp_path / "other")
        assert other.project_root == tmp_path / "other"
        assert other.client is c.registry

    def test_artifacts_dir(self, cfg: cfgmod.Config) -> None:
        cache = ServiceContainer().artifacts
        assert cache.cache_dir == Path(cfg.artifact_dir)
        assert cache.cache_dir.is_dir()


class TestGlobalContainer:
    def test_singleton(self) -> None:
        assert get_container() is get_container()

    def test_reset(self) -> None:
        c1 = get_container()
        reset_container()
        assert get_container() is not c1

    def test_set(self) -> None:
        c = ServiceContainer()
        set_container(c)
        assert get_container() is c
