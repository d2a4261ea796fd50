"""网络工具 - URL 安全校验与 HTTP GET 封装

远端错误统一转换为框架异常:
  - HTTP 404        → NotFoundError
  - 其他 HTTP/URL 错误 → NetworkError
  - JSON 无法解析    → InvalidDataError
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import urlparse

from forgekit.core.exceptions import (
    InvalidDataError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))

DEFAULT_TIMEOUT = 60.0
USER_AGENT = "forgekit"


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def _build_request(url: str, token: str, accept: str) -> urllib.request.Request:
    req = urllib.request.Request(url)
    req.add_header("User-Agent", USER_AGENT)
    req.add_header("Accept", accept)
    if token:
        req.add_header("Authorization", f"Bearer {token}")
    return req


def http_get_bytes(
    url: str, *,
    token: str = "",
    timeout: float = DEFAULT_TIMEOUT,
    context: str = "",
) -> bytes:
    """GET 请求返回原始字节"""
    validate_url_scheme(url, context=context)
    req = _build_request(url, token, "*/*")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            return resp.read()
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise NotFoundError(f"远端资源不存在: {url}") from e
        raise NetworkError(f"请求失败: {url} - HTTP {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise NetworkError(f"请求失败: {url} - {e}") from e


def http_get_json(
    url: str, *,
    token: str = "",
    timeout: float = DEFAULT_TIMEOUT,
    context: str = "",
) -> Any:
    """GET 请求并解析 JSON 响应体"""
    validate_url_scheme(url, context=context)
    req = _build_request(url, token, "application/json")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            raw = resp.read()
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise NotFoundError(f"远端资源不存在: {url}") from e
        raise NetworkError(f"请求失败: {url} - HTTP {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise NetworkError(f"请求失败: {url} - {e}") from e

    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("远端响应不是合法 JSON: %s", url)
        raise InvalidDataError(f"远端响应格式错误: {url} - {e}") from e
