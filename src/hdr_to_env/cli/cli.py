#!/usr/bin/env python3
"""
hdr_to_env.cli.cli

Typer-based CLI converting every ``.hdr`` file of a directory into ``.env``.

Examples
--------
Convert the current directory at the default resolution (256):

    hdr-to-env

Convert at 128 with a local Babylon.js bundle, keeping going on failures:

    hdr-to-env 128 --engine-path ./babylon.js --continue-on-error
"""

from __future__ import annotations

import asyncio
import logging
import sys
import traceback
from pathlib import Path

import typer

from hdr_to_env import __version__
from hdr_to_env.application.options import (
    DEFAULT_BOOTSTRAP_TIMEOUT,
    DEFAULT_ENGINE_URL,
    DEFAULT_ITEM_TIMEOUT,
    DEFAULT_RESOLUTION,
)
from hdr_to_env.application.results import ConversionRequest
from hdr_to_env.errors import HdrToEnvError

app = typer.Typer(
    name="hdr-to-env",
    help="Convert HDR images in a directory to Babylon.js .env environment maps.",
    add_completion=False,
)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
TIMEOUT_HELP = "Seconds before giving up; 0 disables the limit."


def _configure_logging(log_level: str, debug: bool) -> None:
    """Configure root logging for a CLI run."""
    level_name = "DEBUG" if debug else log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level '{log_level}'.")
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _timeout_or_none(value: float) -> float | None:
    return value if value > 0 else None


def _report_discovery(request: ConversionRequest) -> None:
    typer.echo(f"found {request.names}")
    typer.echo(f"converting to env files with a size of {request.resolution}")


def _print_pipeline_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly pipeline error.

    Parameters
    ----------
    exc : Exception
        Exception raised during the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"[red]✗ {type(exc).__name__}:[/red] {exc}", err=True)
    if debug:
        typer.echo("\n[dim]Traceback:[/dim]", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hdr-to-env {__version__}")
        raise typer.Exit()


def _doctor_callback(value: bool) -> None:
    """Print installed toolchain versions."""
    if not value:
        return
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("playwright", "pydantic", "typer"):
        try:
            typer.echo(f"{module}: {metadata.version(module)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")
    typer.echo(f"engine: {DEFAULT_ENGINE_URL}")
    raise typer.Exit()


@app.command()
def convert(
    resolution: int = typer.Argument(
        DEFAULT_RESOLUTION,
        min=1,
        help="Cube-map resolution of the generated environment maps.",
    ),
    input_dir: Path = typer.Option(
        Path("."),
        "--input-dir",
        "-i",
        exists=True,
        file_okay=False,
        help="Directory scanned for .hdr files.",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        file_okay=False,
        help="Directory receiving .env files (defaults to the input directory).",
    ),
    engine_url: str = typer.Option(
        DEFAULT_ENGINE_URL,
        "--engine-url",
        envvar="HDR_TO_ENV_ENGINE_URL",
        help="URL the Babylon.js engine is loaded from.",
    ),
    engine_path: Path | None = typer.Option(
        None,
        "--engine-path",
        envvar="HDR_TO_ENV_ENGINE_PATH",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Local Babylon.js bundle used instead of --engine-url.",
    ),
    continue_on_error: bool = typer.Option(
        False,
        "--continue-on-error/--abort-on-error",
        help="Skip files that fail to convert instead of aborting the batch.",
    ),
    bootstrap_timeout: float = typer.Option(
        DEFAULT_BOOTSTRAP_TIMEOUT, "--bootstrap-timeout", min=0, help=TIMEOUT_HELP
    ),
    item_timeout: float = typer.Option(
        DEFAULT_ITEM_TIMEOUT, "--item-timeout", min=0, help=TIMEOUT_HELP
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
    doctor: bool = typer.Option(
        False,
        "--doctor",
        callback=_doctor_callback,
        is_eager=True,
        help="Print installed toolchain versions.",
    ),
) -> None:
    """Convert every .hdr file in a directory into a .env file.

    Parameters
    ----------
    resolution : int, default=256
        Cube-map resolution forwarded to the rendering engine.
    input_dir : Path
        Scan root; also the write root unless ``--output-dir`` is given.
    continue_on_error : bool, default=False
        Isolate per-file conversion failures instead of aborting.

    Notes
    -----
    - Requires Chromium for Playwright (``playwright install chromium``).
    - Files are selected when their name contains ``.hdr`` anywhere, in any case.
    """
    del version, doctor
    _configure_logging(log_level, debug)

    try:
        from hdr_to_env.application.use_cases import build_pipeline_config, run_pipeline

        config = build_pipeline_config(
            input_dir=input_dir,
            output_dir=output_dir,
            resolution=resolution,
            engine_url=engine_url,
            engine_path=engine_path,
            failure_policy="continue" if continue_on_error else "abort",
            bootstrap_timeout=_timeout_or_none(bootstrap_timeout),
            item_timeout=_timeout_or_none(item_timeout),
            headless=not headed,
        )
        result = asyncio.run(run_pipeline(config, on_discovered=_report_discovery))
    except HdrToEnvError as exc:
        raise typer.Exit(code=_print_pipeline_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_pipeline_error(exc, debug))

    for path in result.written:
        typer.echo(f"[green]✓ Saved:[/green] {path}")
    for name, reason in result.failed.items():
        typer.echo(f"[yellow]! Failed:[/yellow] {name}: {reason}", err=True)


def main() -> None:
    """Console-script entrypoint."""
    app()


if __name__ == "__main__":
    main()
