"""Application ports for the sandbox boundary."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from hdr_to_env.application.options import SandboxOptions
from hdr_to_env.application.results import SourceRecord


class ConversionOracle(Protocol):
    """Opaque HDR to ENV conversion capability."""

    async def convert(self, source: SourceRecord, resolution: int) -> str:
        """Convert one source and return the ENV payload as a binary string.

        Raises ``ConversionError`` on failure.
        """


type SandboxFactory = Callable[
    [SandboxOptions], AbstractAsyncContextManager[ConversionOracle]
]
