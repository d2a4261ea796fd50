"""包名、版本号与路径校验测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from forgekit.core.exceptions import ValidationError
from forgekit.utils.paths import check_name, check_version, ensure_within


class TestCheckName:
    @pytest.mark.parametrize("name", ["lib", "forgekit-http", "forgekit_json", "A1"])
    def test_accepts(self, name: str) -> None:
        assert check_name(name) == name

    @pytest.mark.parametrize(
        "name", ["", ".", "..", "a/b", "a\\b", "a.b", "lib\n", " lib", None, 1],
    )
    def test_rejects(self, name) -> None:
        with pytest.raises(ValidationError, match="包名包含非法字符"):
            check_name(name)


class TestCheckVersion:
    @pytest.mark.parametrize("version", ["1.0", "0.1.0", "1.2.0+build.1", "2.0.0-rc1"])
    def test_accepts(self, version: str) -> None:
        assert check_version(version) == version

    @pytest.mark.parametrize("version", ["", ".", "..", "1/../x", "1.0\n", "1 0", 1.0])
    def test_rejects(self, version) -> None:
        with pytest.raises(ValidationError, match="版本号包含非法字符"):
            check_version(version)


class TestEnsureWithin:
    def test_child_path(self, tmp_path: Path) -> None:
        child = tmp_path / "vendor" / "lib-1.0"
        assert ensure_within(tmp_path, child) == child

    def test_base_itself(self, tmp_path: Path) -> None:
        assert ensure_within(tmp_path, tmp_path) == tmp_path

    def test_parent_escape(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="路径不合法"):
            ensure_within(tmp_path / "vendor", tmp_path / "vendor" / "..")

    def test_symlink_escape(self, tmp_path: Path) -> None:
        base = tmp_path / "vendor"
        base.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (base / "link").symlink_to(outside, target_is_directory=True)
        with pytest.raises(ValidationError):
            ensure_within(base, base / "link")
