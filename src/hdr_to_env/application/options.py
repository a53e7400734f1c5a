"""Typed option objects shared across pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_ENGINE_URL = "https://cdn.babylonjs.com/babylon.js"
DEFAULT_RESOLUTION = 256
DEFAULT_BOOTSTRAP_TIMEOUT = 60.0
DEFAULT_ITEM_TIMEOUT = 120.0


@dataclass(frozen=True)
class SandboxOptions:
    """Browser sandbox configuration.

    ``engine_path`` takes precedence over ``engine_url`` when set. Timeouts of
    ``None`` disable the corresponding bound.
    """

    engine_url: str = DEFAULT_ENGINE_URL
    engine_path: Path | None = None
    headless: bool = True
    bootstrap_timeout: float | None = DEFAULT_BOOTSTRAP_TIMEOUT

    @property
    def engine_source(self) -> str:
        return str(self.engine_path) if self.engine_path else self.engine_url
