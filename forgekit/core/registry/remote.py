"""GitHub 远端注册表

包以 GitHub 仓库形式发布（topic: forgekit-package），版本对应 v{version} tag:
  - 搜索: {api_url}/search/repositories?q={query}+topic:forgekit-package
  - 元信息: {api_url}/repos/{repo}/releases/tags/v{version}
  - 归档: {base_url}/{repo}/archive/refs/tags/v{version}.tar.gz

repo 为包名去掉 "forgekit-" 前缀。鉴权通过 Bearer token。
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import quote

from forgekit.core.exceptions import InvalidDataError
from forgekit.core.registry.models import IndexEntry, PackageMetadata, VersionInfo
from forgekit.utils.net import DEFAULT_TIMEOUT, http_get_bytes, http_get_json

logger = logging.getLogger(__name__)

PACKAGE_TOPIC = "forgekit-package"
NAME_PREFIX = "forgekit-"
DEFAULT_REMOTE_VERSION = "0.1.0"

SEED_ORG = "ledokoz-tech"
SEED_PACKAGES = (
    ("forgekit-serde", "0.1.0"),
    ("forgekit-tokio", "0.1.0"),
    ("forgekit-http", "0.1.0"),
    ("forgekit-gui", "0.1.0"),
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GitHubRegistry:
    """基于 GitHub API 的远端注册表实现"""

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        base_url: str = "https://github.com",
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        index_url: str = "",
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.index_url = index_url

    @staticmethod
    def repo_name(name: str) -> str:
        return name.replace(NAME_PREFIX, "")

    def _get_json(self, url: str, context: str) -> object:
        return http_get_json(url, token=self.token, timeout=self.timeout, context=context)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int) -> list[PackageMetadata]:
        url = (
            f"{self.api_url}/search/repositories"
            f"?q={quote(query)}+topic:{PACKAGE_TOPIC}&sort=stars&order=desc"
        )
        logger.info("远端搜索: %s", query)
        data = self._get_json(url, context="registry search")
        if not isinstance(data, dict):
            raise InvalidDataError(f"搜索响应格式错误: {url}")
        items = data.get("items")
        if not isinstance(items, list):
            return []

        packages = []
        for item in items[:limit]:
            if not isinstance(item, dict):
                continue
            full_name = item.get("full_name") or ""
            packages.append(PackageMetadata(
                name=item.get("name") or "unknown",
                version=DEFAULT_REMOTE_VERSION,
                description=item.get("description") or "",
                authors=[full_name.split("/")[0]],
                repository=item.get("html_url") or "",
                keywords=["forgekit"],
                release_date=_now(),
            ))
        return packages

    def get_info(self, name: str, version: str) -> PackageMetadata:
        url = f"{self.api_url}/repos/{self.repo_name(name)}/releases/tags/v{version}"
        logger.info("远端查询版本信息: %s@%s", name, version)
        release = self._get_json(url, context=f"release info {name}")
        if not isinstance(release, dict):
            raise InvalidDataError(f"版本信息响应格式错误: {url}")
        return PackageMetadata(
            name=name,
            version=version,
            description=release.get("body") or "No description",
            authors=[name.split("/")[0]],
            repository=f"{self.base_url}/{name}",
            keywords=["forgekit"],
            release_date=release.get("published_at") or "",
        )

    # ------------------------------------------------------------------
    # 下载
    # ------------------------------------------------------------------

    def archive_url(self, name: str, version: str) -> str:
        return f"{self.base_url}/{self.repo_name(name)}/archive/refs/tags/v{version}.tar.gz"

    def fetch_archive(self, url: str) -> bytes:
        logger.info("  下载: %s", url)
        return http_get_bytes(url, token=self.token, timeout=self.timeout, context="archive download")

    # ------------------------------------------------------------------
    # 索引快照
    # ------------------------------------------------------------------

    def fetch_index(self) -> dict[str, IndexEntry]:
        """配置了 index_url 时拉取远端索引，否则生成内置种子索引"""
        if self.index_url:
            data = self._get_json(self.index_url, context="index download")
            if not isinstance(data, dict):
                raise InvalidDataError(f"索引响应格式错误: {self.index_url}")
            return {str(n): IndexEntry.from_dict(str(n), e) for n, e in data.items()}
        return self._seed_index()

    def _seed_index(self) -> dict[str, IndexEntry]:
        published = _now()
        entries = {}
        for name, version in SEED_PACKAGES:
            info = VersionInfo(
                version=version,
                git_ref=f"v{version}",
                archive_url=f"{self.base_url}/{SEED_ORG}/{name}/archive/v{version}.tar.gz",
                published=published,
            )
            entries[name] = IndexEntry(name=name, versions={version: info}, latest=version)
        return entries
