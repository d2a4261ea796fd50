"""包名、版本号与落盘路径校验

包名和版本号会直接拼进 vendor/ 与归档缓存路径，进入文件系统前统一在这里校验:
  - 包名: 字母/数字/下划线/连字符
  - 版本号: 额外允许 "." 和 "+"，但不能是 "." 或 ".."
  - ensure_within(): resolve() 后必须仍在 base 目录之内
"""

from __future__ import annotations

import re
from pathlib import Path

from forgekit.core.exceptions import ValidationError

_SAFE_NAME_RE = re.compile(r"[a-zA-Z0-9_\-]+")
_SAFE_VERSION_RE = re.compile(r"[a-zA-Z0-9_.+\-]+")


def check_name(name: str) -> str:
    if not isinstance(name, str) or not _SAFE_NAME_RE.fullmatch(name):
        raise ValidationError(f"包名包含非法字符: {name!r}")
    return name


def check_version(version: str) -> str:
    if (
        not isinstance(version, str)
        or version in (".", "..")
        or not _SAFE_VERSION_RE.fullmatch(version)
    ):
        raise ValidationError(f"版本号包含非法字符: {version!r}")
    return version


def ensure_within(base: Path, path: Path) -> Path:
    """返回 path，若其解析后不在 base 之下则抛 ValidationError"""
    root = Path(base).resolve()
    resolved = Path(path).resolve()
    if resolved != root and root not in resolved.parents:
        raise ValidationError(f"路径不合法: {path} 不在 {base} 之内")
    return path
