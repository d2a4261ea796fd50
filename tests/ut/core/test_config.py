"""配置加载测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from forgekit.core import config as config_mod
from forgekit.core.config import Config, get_config, init_config
from forgekit.core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _reset_global() -> None:
    config_mod._current = None
    yield
    config_mod._current = None


class TestFromEnv:
    def test_xdg_dirs(self) -> None:
        cfg = Config.from_env({
            "HOME": "/home/u",
            "XDG_CACHE_HOME": "/xdg/cache",
            "XDG_DATA_HOME": "/xdg/data",
        })
        assert cfg.cache_dir == str(Path("/xdg/cache/forgekit/cache"))
        assert cfg.artifact_dir == str(Path("/xdg/cache/forgekit/artifacts"))
        assert cfg.index_dir == str(Path("/xdg/data/forgekit/index"))

    def test_home_fallback(self) -> None:
        cfg = Config.from_env({"HOME": "/home/u"})
        assert cfg.cache_dir == str(Path("/home/u/.cache/forgekit/cache"))
        assert cfg.index_dir == str(Path("/home/u/.local/share/forgekit/index"))

    def test_token_from_env(self) -> None:
        cfg = Config.from_env({"HOME": "/h", "FORGEKIT_GITHUB_TOKEN": "abc"})
        assert cfg.github_token == "abc"


class TestFromFile:
    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "nope.yml"))
        assert cfg == Config()

    def test_known_and_extra_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "forgekit.config.yml"
        path.write_text(
            "cache_dir: /tmp/c\nsearch_limit: 5\nextract_archives: true\nmirror: eu\n",
            encoding="utf-8",
        )
        cfg = Config.from_file(str(path))
        assert cfg.cache_dir == "/tmp/c"
        assert cfg.search_limit == 5
        assert cfg.extract_archives is True
        assert cfg.extra == {"mirror": "eu"}

    def test_file_overrides_base(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yml"
        path.write_text("api_url: https://ghe.local/api\n", encoding="utf-8")
        base = Config(github_token="tok", index_dir="/idx")
        cfg = Config.from_file(str(path), base=base)
        assert cfg.api_url == "https://ghe.local/api"
        assert cfg.github_token == "tok"
        assert cfg.index_dir == "/idx"


class TestGlobal:
    def test_get_config_default(self) -> None:
        assert get_config() is get_config()
        assert get_config().search_limit == 20

    def test_init_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        path = tmp_path / "forgekit.config.yml"
        path.write_text("http_timeout: 5\n", encoding="utf-8")

        cfg = init_config(str(path))

        assert get_config() is cfg
        assert cfg.http_timeout == 5
        assert cfg.cache_dir == str(tmp_path / ".cache" / "forgekit" / "cache")


class TestInvalidFile:
    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "forgekit.config.yml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件格式错误"):
            Config.from_file(str(path))

    def test_oversized_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("forgekit.utils.yaml_io.MAX_YAML_SIZE", 4)
        path = tmp_path / "forgekit.config.yml"
        path.write_text("search_limit: 5\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="过大"):
            Config.from_file(str(path))

    def test_init_config_propagates(self, tmp_path: Path) -> None:
        path = tmp_path / "forgekit.config.yml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            init_config(str(path))
        assert config_mod._current is None
