"""Application-layer use-cases, records and option objects."""

from __future__ import annotations

from collections.abc import Callable

from hdr_to_env.application.options import SandboxOptions
from hdr_to_env.application.ports import ConversionOracle, SandboxFactory
from hdr_to_env.application.results import (
    ConversionRequest,
    PipelineResult,
    ResultRecord,
    SourceRecord,
)
from hdr_to_env.schemas import PipelineConfig


async def run_pipeline(
    config: PipelineConfig,
    *,
    sandbox_factory: SandboxFactory | None = None,
    on_discovered: Callable[[ConversionRequest], None] | None = None,
) -> PipelineResult:
    """Run the batch pipeline via lazy use-case import."""
    from hdr_to_env.application.use_cases import run_pipeline as _impl

    return await _impl(
        config, sandbox_factory=sandbox_factory, on_discovered=on_discovered
    )


__all__ = [
    "ConversionOracle",
    "ConversionRequest",
    "PipelineConfig",
    "PipelineResult",
    "ResultRecord",
    "SandboxFactory",
    "SandboxOptions",
    "SourceRecord",
    "run_pipeline",
]
