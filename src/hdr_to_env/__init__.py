"""Batch HDR to ENV environment-map conversion."""

from __future__ import annotations

from pathlib import Path

from hdr_to_env.application.options import DEFAULT_RESOLUTION
from hdr_to_env.application.results import PipelineResult
from hdr_to_env.types import FailurePolicy

__version__ = "0.1.0"


def convert_directory(
    input_dir: Path,
    output_dir: Path | None = None,
    resolution: int = DEFAULT_RESOLUTION,
    *,
    failure_policy: FailurePolicy = "abort",
    engine_path: Path | None = None,
) -> PipelineResult:
    """Convert every ``.hdr`` file in a directory to ``.env``.

    Parameters
    ----------
    input_dir : Path
        Directory scanned for HDR files.
    output_dir : Path | None, default=None
        Where ENV files are written. Defaults to ``input_dir``.
    resolution : int, default=256
        Cube-map resolution passed to the rendering engine.
    failure_policy : {"abort", "continue"}, default="abort"
        Whether one failed conversion stops the batch.
    engine_path : Path | None, default=None
        Local Babylon.js bundle used instead of the CDN copy.

    Returns
    -------
    PipelineResult
        Summary of the run.
    """
    from .api import convert_directory as _impl

    return _impl(
        input_dir=input_dir,
        output_dir=output_dir,
        resolution=resolution,
        failure_policy=failure_policy,
        engine_path=engine_path,
    )


__all__ = ["PipelineResult", "convert_directory"]
