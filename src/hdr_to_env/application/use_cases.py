"""Application use-cases orchestrating the batch conversion pipeline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from hdr_to_env.adapters.discovery import discover_sources
from hdr_to_env.adapters.persistence import write_results
from hdr_to_env.application.options import (
    DEFAULT_BOOTSTRAP_TIMEOUT,
    DEFAULT_ENGINE_URL,
    DEFAULT_ITEM_TIMEOUT,
    DEFAULT_RESOLUTION,
)
from hdr_to_env.application.ports import ConversionOracle, SandboxFactory
from hdr_to_env.application.results import (
    ConversionRequest,
    PipelineResult,
    ResultRecord,
)
from hdr_to_env.codec import derive_env_name
from hdr_to_env.errors import ConfigurationError, ConversionError
from hdr_to_env.schemas import PipelineConfig
from hdr_to_env.types import FailurePolicy

logger = logging.getLogger(__name__)


def build_pipeline_config(
    *,
    input_dir: Path,
    output_dir: Path | None = None,
    resolution: int = DEFAULT_RESOLUTION,
    engine_url: str = DEFAULT_ENGINE_URL,
    engine_path: Path | None = None,
    failure_policy: FailurePolicy = "abort",
    bootstrap_timeout: float | None = DEFAULT_BOOTSTRAP_TIMEOUT,
    item_timeout: float | None = DEFAULT_ITEM_TIMEOUT,
    headless: bool = True,
) -> PipelineConfig:
    """Build a validated config from command/API params."""
    try:
        return PipelineConfig(
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
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid pipeline parameters: {exc}") from exc


async def convert_sources(
    request: ConversionRequest,
    oracle: ConversionOracle,
    *,
    failure_policy: FailurePolicy = "abort",
    item_timeout: float | None = None,
) -> list[ResultRecord]:
    """Use-case: convert every source strictly one after another.

    Item ``i + 1`` is only submitted once item ``i`` has returned. With
    ``failure_policy="abort"`` the first failure propagates and the remaining
    sources are not attempted; with ``"continue"`` the failed source yields a
    record without payload. A timed-out item always aborts the batch, since
    the shared rendering context may still be busy with it.
    """
    results: list[ResultRecord] = []
    total = len(request.sources)
    for index, source in enumerate(request.sources, start=1):
        output_name = derive_env_name(source.name)
        logger.info("[%d/%d] converting %s -> %s", index, total, source.name, output_name)
        try:
            payload = await asyncio.wait_for(
                oracle.convert(source, request.resolution), timeout=item_timeout
            )
        except TimeoutError as exc:
            raise ConversionError(
                f"Conversion of {source.name} timed out after {item_timeout}s",
                source_name=source.name,
            ) from exc
        except ConversionError as exc:
            if failure_policy == "abort":
                raise
            logger.warning("conversion of %s failed, continuing: %s", source.name, exc)
            results.append(
                ResultRecord(
                    name=output_name,
                    payload=None,
                    source_name=source.name,
                    error=str(exc),
                )
            )
            continue
        results.append(ResultRecord(name=output_name, payload=payload, source_name=source.name))
    return results


async def run_pipeline(
    config: PipelineConfig,
    *,
    sandbox_factory: SandboxFactory | None = None,
    on_discovered: Callable[[ConversionRequest], None] | None = None,
) -> PipelineResult:
    """Use-case: discover, convert and persist every HDR file of a directory.

    Parameters
    ----------
    config : PipelineConfig
        Validated run configuration.
    sandbox_factory : SandboxFactory | None, default=None
        Builds the conversion oracle context. Defaults to a headless browser
        sandbox.
    on_discovered : Callable[[ConversionRequest], None] | None, default=None
        Called once discovery finished and before the sandbox starts.

    Returns
    -------
    PipelineResult
        Discovered names, written paths and isolated failures.
    """
    sources = await discover_sources(config.input_dir)
    request = ConversionRequest(sources=tuple(sources), resolution=config.resolution)
    logger.info("found %s", request.names)
    if on_discovered is not None:
        on_discovered(request)
    if not sources:
        return PipelineResult(resolution=config.resolution)

    if sandbox_factory is None:
        from hdr_to_env.infrastructure.sandbox import open_browser_sandbox

        sandbox_factory = open_browser_sandbox

    logger.info("converting to env files with a size of %d", config.resolution)
    async with sandbox_factory(config.sandbox_options()) as oracle:
        results = await convert_sources(
            request,
            oracle,
            failure_policy=config.failure_policy,
            item_timeout=config.item_timeout,
        )

    written = await write_results(results, config.target_dir)
    return PipelineResult(
        resolution=config.resolution,
        discovered=request.names,
        written=written,
        skipped=[record.name for record in results if not record.succeeded],
        failed={
            record.source_name: record.error or ""
            for record in results
            if not record.succeeded
        },
    )
