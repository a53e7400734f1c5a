"""Public directory conversion API (delegates to application use-cases)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from hdr_to_env.application.options import (
    DEFAULT_BOOTSTRAP_TIMEOUT,
    DEFAULT_ENGINE_URL,
    DEFAULT_ITEM_TIMEOUT,
    DEFAULT_RESOLUTION,
)
from hdr_to_env.application.ports import SandboxFactory
from hdr_to_env.application.results import PipelineResult
from hdr_to_env.application.use_cases import build_pipeline_config, run_pipeline
from hdr_to_env.types import FailurePolicy


def convert_directory(
    input_dir: Path,
    output_dir: Optional[Path] = None,
    resolution: int = DEFAULT_RESOLUTION,
    engine_url: str = DEFAULT_ENGINE_URL,
    engine_path: Optional[Path] = None,
    failure_policy: FailurePolicy = "abort",
    bootstrap_timeout: Optional[float] = DEFAULT_BOOTSTRAP_TIMEOUT,
    item_timeout: Optional[float] = DEFAULT_ITEM_TIMEOUT,
    headless: bool = True,
    sandbox_factory: Optional[SandboxFactory] = None,
) -> PipelineResult:
    """Convert every HDR file in ``input_dir`` into an ENV file."""
    config = build_pipeline_config(
        input_dir=input_dir,
        output_dir=output_dir,
        resolution=resolution,
        engine_url=engine_url,
        engine_path=engine_path,
        failure_policy=failure_policy,
        bootstrap_timeout=bootstrap_timeout,
        item_timeout=item_timeout,
        headless=headless,
    )
    return asyncio.run(run_pipeline(config, sandbox_factory=sandbox_factory))
