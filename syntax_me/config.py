"""Formatter settings and where they come from."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

CONFIG_TABLE = "syntax-me"
DOTFILE_NAME = ".syntax-me.toml"

# Files consulted in each directory, in order, with the tables they may hold.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", CONFIG_TABLE),)),
    (DOTFILE_NAME, ((CONFIG_TABLE,), ("tool", CONFIG_TABLE))),
)


@dataclass
class FormatConfig:
    """Configuration for the formatters and the command line.

    Attributes:
        indent_chars: Characters emitted once per indentation level.
        indent_spaces: Number of spaces per level; overrides `indent_chars`
            when set.
        max_file_size: Maximum input size in bytes the CLI will read.

    Examples:
        FormatConfig(indent_spaces=4)
    """

    indent_chars: str = "  "
    indent_spaces: int | None = None
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Raised for settings that cannot be used to format anything."""


def iter_search_dirs(search_path: Path) -> Iterator[Path]:
    """Yield `search_path` and each of its parents up to the filesystem root."""
    start = search_path.resolve()
    yield start
    yield from start.parents


def load_config(search_path: Path) -> FormatConfig:
    """Return the settings that apply to files under `search_path`.

    The first directory, walking upwards, whose `pyproject.toml` has a
    ``[tool.syntax-me]`` table or whose `.syntax-me.toml` has a ``[syntax-me]``
    or ``[tool.syntax-me]`` table wins, even when that table is empty.
    Unreadable or malformed files are ignored.

    Raises:
        ConfigError: If the winning table is not a table or has unknown keys.
    """
    for directory in iter_search_dirs(search_path):
        for filename, table_paths in CONFIG_SOURCES:
            source = directory / filename
            found = _find_table(source, table_paths)
            if found is not None:
                table_name, settings = found
                return normalize_config(_config_from_table(settings, table_name, source))
    return FormatConfig()


def _find_table(
    source: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[str, object] | None:
    try:
        document = tomllib.loads(source.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        value: object = document
        for key in table_path:
            if not isinstance(value, dict) or key not in value:
                break
            value = value[key]
        else:
            return ".".join(table_path), value
    return None


def _config_from_table(settings: object, table_name: str, source: Path) -> FormatConfig:
    if not isinstance(settings, dict):
        raise ConfigError(f"`[{table_name}]` in {source} must be a table")

    unknown = sorted(set(settings) - {field.name for field in fields(FormatConfig)})
    if unknown:
        raise ConfigError(f"Unknown key(s) {', '.join(unknown)} in `[{table_name}]` of {source}")
    return FormatConfig(**settings)


def normalize_config(config: FormatConfig) -> FormatConfig:
    """Resolve `indent_spaces` into `indent_chars`."""
    if config.indent_spaces is None:
        return config
    _require_positive_int("indent_spaces", config.indent_spaces)
    return replace(config, indent_chars=" " * config.indent_spaces)


def validate_config(config: FormatConfig) -> None:
    """Check that `config` describes a usable indentation and size limit.

    Raises:
        ConfigError: If the indentation is empty or not whitespace, or the size
            limit is not a positive integer.

    Examples:
        validate_config(FormatConfig(indent_chars="\\t"))
    """
    config = normalize_config(config)

    if not isinstance(config.indent_chars, str) or not config.indent_chars:
        raise ConfigError("`indent_chars` must not be empty")
    if config.indent_chars.strip(" \t"):
        raise ConfigError("`indent_chars` must contain only spaces or tabs")
    _require_positive_int("max_file_size", config.max_file_size)


def apply_overrides(config: FormatConfig, **overrides: object) -> FormatConfig:
    """Return `config` with the non-None `overrides` applied.

    An explicit `indent_chars` drops any configured `indent_spaces`, since the
    latter would otherwise win.

    Raises:
        TypeError: If an override name is not a `FormatConfig` field.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    if "indent_chars" in changes:
        changes.setdefault("indent_spaces", None)
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatConfig:
    """Load settings for `search_path`, apply command-line overrides and validate.

    Examples:
        config = build_config(Path.cwd(), indent_spaces=4)
    """
    config = normalize_config(apply_overrides(load_config(search_path), **overrides))
    validate_config(config)
    return config


def _require_positive_int(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`{name}` must be a positive integer")
