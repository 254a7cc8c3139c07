"""
Reformats markup, stylesheet or script text.
Reads a file (or stdin), detects what it holds, and prints the formatted text,
or writes it back with --in-place / --output.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, build_config
from .exceptions import InputTooLargeError
from .filesystem import (
    enforce_size,
    get_max_file_size,
    read_source,
    resolve_output_path,
    write_atomic,
)
from .logging import configure_logging
from .models import SourceKind
from .orchestrator import format_text

__all__ = ["cli"]

KIND_CHOICES = [kind.value for kind in SourceKind if kind is not SourceKind.UNKNOWN]


@click.command()
@click.version_option()
@click.option("--kind", "kind_name", type=click.Choice(KIND_CHOICES), help="Format as this kind")
@click.option("--detect-only", is_flag=True, help="Print the detected kind and exit")
@click.option("--in-place", "-i", is_flag=True, help="Rewrite FILEPATH with the result")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=True, path_type=Path),
    help="Write the result to this file, or to formatted.<ext> inside this directory",
)
@click.option("--indent-chars", help="Indentation characters")
@click.option("--indent-spaces", type=int, help="Spaces per indentation level")
@click.option("--verbose", "-v", is_flag=True, help="Log detection and fallbacks to stderr")
@click.argument(
    "filepath", type=click.Path(exists=True, dir_okay=False, allow_dash=True), default="-"
)
def cli(
    filepath: str,
    kind_name: str | None = None,
    detect_only: bool = False,
    in_place: bool = False,
    output: Path | None = None,
    indent_chars: str | None = None,
    indent_spaces: int | None = None,
    verbose: bool = False,
):
    """
    Entry point for formatting a file or standard input.

    Args:
        filepath: File to format, or ``-`` for standard input.
        kind_name: Kind to format as instead of detecting it.
        detect_only: Only print the detected kind.
        in_place: Rewrite `filepath` with the formatted text.
        output: File or directory receiving the formatted text.
        indent_chars: Override for the indentation characters.
        indent_spaces: Override for the number of spaces per level.
        verbose: Enable debug logging on stderr.

    Raises:
        click.BadParameter: If options conflict or configuration is invalid.
        click.ClickException: If the input cannot be read or is too large, or
            the output cannot be written.

    Examples:
        syntax-me index.html --indent-spaces 4
        cat app.js | syntax-me --kind script
    """
    if verbose:
        configure_logging(verbose=True)

    from_stdin = filepath == "-"
    if in_place and from_stdin:
        raise click.BadParameter("--in-place needs a FILEPATH", param_hint="--in-place")
    if in_place and output is not None:
        raise click.BadParameter("--in-place cannot be combined with --output")

    search_path = Path.cwd() if from_stdin else Path(filepath).resolve().parent
    try:
        config = build_config(
            search_path, indent_chars=indent_chars, indent_spaces=indent_spaces
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        if from_stdin:
            raw = click.get_text_stream("stdin").read()
            enforce_size(len(raw.encode("utf-8")), max_file_size, "Standard input")
        else:
            raw = read_source(Path(filepath), max_file_size)
    except (IOError, InputTooLargeError) as error:
        raise click.ClickException(str(error)) from error

    kind = SourceKind(kind_name) if kind_name else None
    result = format_text(raw, config, kind=kind)

    if detect_only:
        click.echo(result.detected_kind.value)
        return

    try:
        if in_place:
            if result.formatted_text != raw:
                write_atomic(Path(filepath), result.formatted_text)
        elif output is not None:
            write_atomic(resolve_output_path(output, result.detected_kind), result.formatted_text)
        else:
            click.echo(result.formatted_text, nl=False)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
