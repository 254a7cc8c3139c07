from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from syntax_me.exceptions import InputTooLargeError
from syntax_me.filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    enforce_size,
    get_max_file_size,
    read_source,
    resolve_output_path,
    write_atomic,
)
from syntax_me.models import SourceKind


def test_max_file_size_defaults_without_env(monkeypatch):
    monkeypatch.delenv(MAX_FILE_SIZE_ENV_VAR, raising=False)
    assert get_max_file_size(default=123) == 123


def test_max_file_size_from_env(monkeypatch):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, "2048")
    assert get_max_file_size(default=123) == 2048


@pytest.mark.parametrize("value", ["abc", "0", "-5"])
def test_max_file_size_rejects_invalid_env(monkeypatch, value):
    monkeypatch.setenv(MAX_FILE_SIZE_ENV_VAR, value)
    with pytest.raises(ValueError, match=MAX_FILE_SIZE_ENV_VAR):
        get_max_file_size()


def test_enforce_size_allows_limit():
    enforce_size(10, 10, "input")


def test_enforce_size_rejects_larger_input():
    with pytest.raises(InputTooLargeError) as excinfo:
        enforce_size(11, 10, "input")

    assert excinfo.value.size == 11
    assert excinfo.value.limit == 10
    assert str(excinfo.value) == "input exceeds the maximum allowed size of 10 bytes (11 bytes)."


def test_read_source_keeps_line_endings(tmp_path: Path):
    target = tmp_path / "a.css"
    target.write_bytes(b"a{b:c}\r\n")

    assert read_source(target, 1024) == "a{b:c}\r\n"


def test_read_source_rejects_large_file(tmp_path: Path):
    target = tmp_path / "big.js"
    target.write_text("x" * 100, encoding="utf-8")

    with pytest.raises(InputTooLargeError):
        read_source(target, 10)


def test_read_source_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "bad.html"
    target.write_bytes(b"<p>\xff</p>")

    with pytest.raises(IOError, match="Invalid UTF-8"):
        read_source(target, 1024)


def test_read_source_rejects_symlinks(tmp_path: Path):
    target = tmp_path / "real.css"
    target.write_text("a{}", encoding="utf-8")
    link = tmp_path / "link.css"
    link.symlink_to(target)

    with pytest.raises(IOError, match="Symlinks are not supported"):
        read_source(link, 1024)


def test_read_source_rejects_missing_file(tmp_path: Path):
    with pytest.raises(IOError, match="Error accessing"):
        read_source(tmp_path / "missing.css", 1024)


def test_resolve_output_path_in_directory(tmp_path: Path):
    assert resolve_output_path(tmp_path, SourceKind.SCRIPT) == tmp_path / "formatted.js"
    assert resolve_output_path(tmp_path, SourceKind.UNKNOWN) == tmp_path / "formatted.txt"


def test_resolve_output_path_keeps_file_target(tmp_path: Path):
    target = tmp_path / "out.css"
    assert resolve_output_path(target, SourceKind.MARKUP) == target


def test_write_atomic_creates_file(tmp_path: Path):
    target = tmp_path / "new.html"

    write_atomic(target, "<p>x</p>\n")

    assert target.read_text(encoding="utf-8") == "<p>x</p>\n"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["new.html"]


def test_write_atomic_preserves_permissions(tmp_path: Path):
    target = tmp_path / "keep.css"
    target.write_text("old", encoding="utf-8")
    os.chmod(target, 0o640)

    write_atomic(target, "new")

    assert target.read_text(encoding="utf-8") == "new"
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o640


def test_write_atomic_reports_missing_directory(tmp_path: Path):
    with pytest.raises(IOError, match="Error writing"):
        write_atomic(tmp_path / "missing" / "out.css", "x")
