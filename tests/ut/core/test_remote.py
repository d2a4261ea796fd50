"""GitHub 远端注册表测试 - URL 构造与响应解析（不访问网络）"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from forgekit.core.exceptions import InvalidDataError
from forgekit.core.registry import GitHubRegistry


class _Recorder:
    """替换 urlopen: 记录请求 URL，按顺序返回预设响应体"""

    def __init__(self, *bodies: Any) -> None:
        self.bodies = list(bodies)
        self.urls: list[str] = []

    def __call__(self, req, timeout=None):
        self.urls.append(req.full_url)
        body = self.bodies.pop(0)
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        resp = MagicMock()
        resp.read.return_value = body
        resp.__enter__.return_value = resp
        return resp


@pytest.fixture()
def registry() -> GitHubRegistry:
    return GitHubRegistry(api_url="https://api.test", base_url="https://gh.test", token="t0k")


class TestRepoName:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("forgekit-http", "http"), ("ledokoz/forgekit-gui", "ledokoz/gui"), ("plain", "plain")],
    )
    def test_prefix_stripped(self, name: str, expected: str) -> None:
        assert GitHubRegistry.repo_name(name) == expected


class TestSearch:
    def test_url_and_mapping(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        rec = _Recorder({"items": [{
            "name": "forgekit-json",
            "full_name": "acme/forgekit-json",
            "description": "JSON codec",
            "html_url": "https://gh.test/acme/forgekit-json",
        }]})
        monkeypatch.setattr("urllib.request.urlopen", rec)

        (pkg,) = registry.search("json", 20)

        assert rec.urls == [
            "https://api.test/search/repositories"
            "?q=json+topic:forgekit-package&sort=stars&order=desc"
        ]
        assert pkg.name == "forgekit-json"
        assert pkg.version == "0.1.0"
        assert pkg.authors == ["acme"]
        assert pkg.repository == "https://gh.test/acme/forgekit-json"
        assert pkg.keywords == ["forgekit"]
        assert pkg.license == "MIT"
        assert pkg.targets == ["ledokoz"]

    def test_query_is_escaped(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        rec = _Recorder({"items": []})
        monkeypatch.setattr("urllib.request.urlopen", rec)
        registry.search("a b", 20)
        assert "q=a%20b+topic" in rec.urls[0]

    def test_limit_applied(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        items = [{"name": f"p{i}", "full_name": f"o/p{i}"} for i in range(5)]
        monkeypatch.setattr("urllib.request.urlopen", _Recorder({"items": items}))
        assert len(registry.search("p", 3)) == 3

    def test_missing_fields_defaulted(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("urllib.request.urlopen", _Recorder({"items": [{}]}))
        (pkg,) = registry.search("x", 20)
        assert pkg.name == "unknown"
        assert pkg.description == ""

    def test_no_items_key(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("urllib.request.urlopen", _Recorder({"message": "rate limited"}))
        assert registry.search("x", 20) == []

    def test_non_object_response(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("urllib.request.urlopen", _Recorder([1, 2]))
        with pytest.raises(InvalidDataError):
            registry.search("x", 20)


class TestGetInfo:
    def test_release_mapping(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        rec = _Recorder({"body": "Release notes", "published_at": "2024-05-01T12:00:00Z"})
        monkeypatch.setattr("urllib.request.urlopen", rec)

        meta = registry.get_info("forgekit-http", "0.2.0")

        assert rec.urls == ["https://api.test/repos/http/releases/tags/v0.2.0"]
        assert meta.name == "forgekit-http"
        assert meta.version == "0.2.0"
        assert meta.description == "Release notes"
        assert meta.release_date == "2024-05-01T12:00:00Z"
        assert meta.repository == "https://gh.test/forgekit-http"

    def test_empty_body_defaults(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("urllib.request.urlopen", _Recorder({"body": None}))
        assert registry.get_info("lib", "1.0").description == "No description"


class TestArchive:
    def test_archive_url(self, registry: GitHubRegistry) -> None:
        assert registry.archive_url("forgekit-gui", "1.2.3") == (
            "https://gh.test/gui/archive/refs/tags/v1.2.3.tar.gz"
        )

    def test_fetch_archive(self, registry: GitHubRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        rec = _Recorder(b"\x1f\x8bbinary")
        monkeypatch.setattr("urllib.request.urlopen", rec)
        assert registry.fetch_archive("https://gh.test/x.tar.gz") == b"\x1f\x8bbinary"


class TestFetchIndex:
    def test_seed_index(self, registry: GitHubRegistry) -> None:
        entries = registry.fetch_index()
        assert set(entries) == {"forgekit-serde", "forgekit-tokio", "forgekit-http", "forgekit-gui"}
        http = entries["forgekit-http"]
        assert http.latest == "0.1.0"
        info = http.versions["0.1.0"]
        assert info.git_ref == "v0.1.0"
        assert info.archive_url == (
            "https://gh.test/ledokoz-tech/forgekit-http/archive/v0.1.0.tar.gz"
        )
        assert info.published

    def test_remote_index_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        doc = {"lib": {"name": "lib", "latest": "1.0", "versions": {
            "1.0": {"version": "1.0", "git_ref": "v1.0",
                    "archive_url": "https://x/lib.tar.gz", "published": "p"},
        }}}
        rec = _Recorder(doc)
        monkeypatch.setattr("urllib.request.urlopen", rec)

        entries = GitHubRegistry(index_url="https://index.test/packages.json").fetch_index()

        assert rec.urls == ["https://index.test/packages.json"]
        assert entries["lib"].versions["1.0"].archive_url == "https://x/lib.tar.gz"
