import importlib.metadata
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import typer

from tab_morph.data.converter import convert as convert_file, detect as detect_format
from tab_morph.data.exceptions import UnsupportedOutputError
from tab_morph.data.formats import Format, OUTPUT_EXTENSIONS
from tab_morph.utils.file_utils import get_metadata

COMMANDS = ("convert", "detect", "meta")

app = typer.Typer(help=(
    "Convert tabular files between CSV, XLSX, XLS and JSON with automatic input detection.\n\n"
    "Shorthand: tmo-cli INPUT OUTPUT converts. An input file named like a command "
    "(convert, detect, meta) needs the explicit form: tmo-cli convert meta out.csv, "
    "or tmo-cli -- meta out.csv."
))

@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable info logging"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    if version:
        version_str = importlib.metadata.version("tab-morph")
        typer.echo(version_str)
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)
    level = logging.WARNING
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    logging.basicConfig(level=level)

@app.command()
def convert(input_path: Path = typer.Argument(..., help="Path to the input file (csv, xlsx, xls or json)"),
            output_path: Path = typer.Argument(..., help="Path to the output file (.csv, .xlsx or .json)")):
    """
    Convert a file. The input format is detected; the output format follows the output extension.
    """
    if not input_path.exists():
        typer.echo(f"Error: file not found: {input_path}", err=True)
        raise typer.Exit(code=1)
    try:
        Format.output_from_path(output_path)
    except UnsupportedOutputError:
        typer.echo(f"Error: unsupported output format: {output_path.suffix.lower() or '(none)'}", err=True)
        typer.echo(f"Supported: {', '.join(OUTPUT_EXTENSIONS)}", err=True)
        raise typer.Exit(code=1)

    try:
        rows = convert_file(input_path, output_path)
    except Exception as e:
        typer.echo(f"Error: conversion failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Converted {output_path} ({rows} rows)")

@app.command()
def detect(file_path: Path = typer.Argument(..., help="Path to the file to inspect")):
    """
    Print the detected type of a file: csv, xlsx, xls or json.
    """
    try:
        fmt = detect_format(file_path)
    except Exception as e:
        typer.echo(f"Error: detection failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(fmt.value)

@app.command()
def meta(file_path: Path = typer.Argument(..., help="Path to the input file")):
    """
    Print the metadata of a file.
    """
    try:
        metadata = get_metadata(file_path)
    except Exception as e:
        typer.echo(f"Error extracting metadata: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(metadata, default=str, indent=2, ensure_ascii=False))


def route_args(argv: Sequence[str]) -> List[str]:
    """Insert ``convert`` before the first positional argument when it names no command.

    ``tmo-cli in.xlsx out.csv`` is shorthand for ``tmo-cli convert in.xlsx out.csv``.
    A bare ``--`` also selects ``convert``, so ``tmo-cli -- meta out.csv``
    converts a file named ``meta``.
    """
    args = list(argv)
    for i, arg in enumerate(args):
        if arg == "--":
            args.insert(i, "convert")
            break
        if arg.startswith("-"):
            continue
        if arg not in COMMANDS:
            args.insert(i, "convert")
        break
    return args


def run(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point."""
    args = route_args(sys.argv[1:] if argv is None else argv)
    try:
        app(args=args, prog_name="tmo-cli")
    except SystemExit as exc:
        # click reports usage errors with status 2; every failure here is 1
        if exc.code == 2:
            raise SystemExit(1) from None
        raise


if __name__ == "__main__":
    run()
