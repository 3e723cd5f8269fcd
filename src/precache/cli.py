from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from precache.config import BuildConfig, load_config
from precache.errors import PrecacheError
from precache.generator import generate
from precache.runtime import configure_logging
from precache.stages import clean, copy_dev_to_dist, copy_helpers
from precache.ui.render import render_decisions

app = typer.Typer(help="Precache manifest build tool")

console = Console()
logger = logging.getLogger(__name__)

ROOT_OPTION = typer.Option(None, "--root", file_okay=False, help="Project root (default: cwd)")
CONFIG_OPTION = typer.Option(None, "--config", exists=True, dir_okay=False)
MAX_BYTES_OPTION = typer.Option(None, "--max-bytes", min=1)
MAX_FILES_OPTION = typer.Option(None, "--max-files", min=1)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v")


def _load(
    root: Path | None,
    config_file: Path | None,
    max_bytes: int | None = None,
    max_files: int | None = None,
    verbose: bool = False,
) -> BuildConfig:
    configure_logging(logging.DEBUG if verbose else logging.INFO)
    try:
        return load_config(
            root=root,
            config_file=config_file,
            max_bytes=max_bytes,
            max_files=max_files,
        )
    except (ValidationError, ValueError) as exc:
        console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc


def _fail(exc: Exception) -> typer.Exit:
    logger.error("run failed: %s", exc)
    console.print(f"Build failed: {exc}")
    return typer.Exit(code=1)


def _generate(config: BuildConfig) -> None:
    try:
        result = generate(config)
    except (PrecacheError, OSError) as exc:
        raise _fail(exc) from exc
    render_decisions(result.decisions, console)
    console.print(f"Wrote: {result.output_path}")


def _copy(config: BuildConfig) -> None:
    try:
        helpers = copy_helpers(config)
        count = copy_dev_to_dist(config)
    except OSError as exc:
        raise _fail(exc) from exc
    console.print(f"Copied {len(helpers)} helpers, {count} files to {config.dist_path}")


@app.command("generate")
def generate_cmd(
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    max_bytes: int | None = MAX_BYTES_OPTION,
    max_files: int | None = MAX_FILES_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    config = _load(root, config_file, max_bytes, max_files, verbose)
    _generate(config)


@app.command("copy")
def copy_cmd(
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    config = _load(root, config_file, verbose=verbose)
    _copy(config)


@app.command("build", help="Copy the dev tree, then generate the worker script")
def build_cmd(
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    max_bytes: int | None = MAX_BYTES_OPTION,
    max_files: int | None = MAX_FILES_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    config = _load(root, config_file, max_bytes, max_files, verbose)
    _copy(config)
    _generate(config)


@app.command("clean")
def clean_cmd(
    root: Path | None = ROOT_OPTION,
    config_file: Path | None = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    config = _load(root, config_file, verbose=verbose)
    try:
        removed = clean(config)
    except OSError as exc:
        raise _fail(exc) from exc
    if not removed:
        console.print("Nothing to clean")
        return
    for path in removed:
        console.print(f"Removed: {path}")


if __name__ == "__main__":
    app()
