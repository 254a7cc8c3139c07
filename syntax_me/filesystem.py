"""Filesystem helpers for the syntax-me command line."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE
from .exceptions import InputTooLargeError
from .models import SourceKind

MAX_FILE_SIZE_ENV_VAR = "SYNTAX_ME_MAX_FILE_SIZE"
EXPORT_STEM = "formatted"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed input size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed input size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["SYNTAX_ME_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    return stat_result


def enforce_size(size: int, max_size: int, source: str) -> None:
    """Guard against input that exceeds the configured maximum size.

    Raises:
        InputTooLargeError: If `size` exceeds `max_size`.
    """
    if size > max_size:
        raise InputTooLargeError(source, size, max_size)


def read_source(filepath: Path, max_size: int) -> str:
    """Read a UTF-8 text file after checking its type and size.

    Args:
        filepath: File to read.
        max_size: Maximum allowed size in bytes.

    Returns:
        str: File content.

    Raises:
        IOError: If the file is missing, not a regular file, or not valid UTF-8.
        InputTooLargeError: If the file is larger than `max_size`.

    Examples:
        text = read_source(Path("index.html"), 1024 * 1024)
    """
    stat_result = collect_file_stat(filepath)
    enforce_size(stat_result.st_size, max_size, str(filepath))

    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IOError(error_message) from error
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def resolve_output_path(target: Path, kind: SourceKind) -> Path:
    """Return where formatted output goes.

    A directory target receives ``formatted.<ext>`` named after `kind`;
    any other target is used as is.

    Examples:
        resolve_output_path(Path("build"), SourceKind.STYLESHEET)  # build/formatted.css
    """
    if target.is_dir():
        return target / f"{EXPORT_STEM}.{kind.extension}"
    return target


def write_atomic(filepath: Path, text: str) -> None:
    """Write `text` to `filepath` through a temporary file and an atomic replace.

    Keeps the permission bits of an existing file.

    Raises:
        IOError: If the file cannot be written.
    """
    permissions = None
    if filepath.exists():
        permissions = stat.S_IMODE(collect_file_stat(filepath).st_mode)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        if permissions is not None:
            os.chmod(temp_path, permissions)
        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Error writing {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
