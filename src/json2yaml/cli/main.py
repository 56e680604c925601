"""json2yaml CLI entry point."""

import io
import platform
import sys
from typing import TextIO

import click

from .. import __version__, convert
from ..context import Json2YamlContext, SettingsError, pass_context, resolve_settings
from ..errors import ConversionError, OutputFailure

NAME = "json2yaml"
REVISION = "HEAD"

VERSION_MESSAGE = (
    f"%(prog)s %(version)s (rev: {REVISION}/python {platform.python_version()})"
)


def _open_stdout() -> io.TextIOWrapper:
    # YAML is always written as UTF-8, whatever the locale says
    return io.TextIOWrapper(
        click.get_binary_stream("stdout"), encoding="utf-8", newline="\n"
    )


def _describe(error: Exception) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


def convert_file(name: str, output: TextIO, ctx: Json2YamlContext) -> bool:
    """Convert one file (or ``-`` for stdin) and report any failure.

    Returns:
        True if the file converted cleanly
    """
    label = "<stdin>" if name == "-" else name
    try:
        with click.open_file(name, "rb") as f:
            convert(f, output, settings=ctx.settings)
    except (ConversionError, OSError) as e:
        if not isinstance(e, OutputFailure):
            output.flush()
        click.echo(f"{NAME}: {label}: {_describe(e)}", err=True)
        return False
    return True


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("files", nargs=-1)
@click.option(
    "--chunk-size",
    type=int,
    default=None,
    help="Characters read per refill (overrides $JSON2YAML_CHUNK_SIZE)",
)
@click.option(
    "--buffer-size",
    type=int,
    default=None,
    help="Output characters buffered before writing (overrides $JSON2YAML_BUFFER_SIZE)",
)
@click.version_option(
    __version__,
    "-version",
    "--version",
    prog_name=NAME,
    message=VERSION_MESSAGE,
    help="Print version and exit.",
)
@pass_context
def cli(ctx, files, chunk_size, buffer_size):
    """json2yaml - convert JSON to YAML.

    Each FILE is converted in turn to standard output, with a --- line
    between the results. With no FILE, or when FILE is -, standard input
    is read.

    A file may hold several concatenated JSON values; each becomes its own
    YAML document.

    \b
    Examples:
        json2yaml data.json
        curl -s https://api.example.com/items | json2yaml
        json2yaml a.json b.json > combined.yaml
    """
    try:
        ctx.settings = resolve_settings(chunk_size, buffer_size)
    except SettingsError as e:
        raise click.UsageError(str(e))

    output = _open_stdout()
    try:
        for i, name in enumerate(files or ("-",)):
            if i > 0:
                output.write("---\n")
            if not convert_file(name, output, ctx):
                ctx.failed = True
    finally:
        output.flush()
        output.detach()

    if ctx.failed:
        sys.exit(1)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
