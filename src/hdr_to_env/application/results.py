"""Application-layer records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from hdr_to_env.application.options import DEFAULT_RESOLUTION
from hdr_to_env.codec import binary_string_to_bytes


@dataclass(frozen=True)
class SourceRecord:
    """One discovered HDR input.

    ``payload`` is the full file content as a base64 data URL.
    """

    name: str
    payload: str


@dataclass(frozen=True)
class ResultRecord:
    """One conversion output.

    ``payload`` is a binary string, or ``None`` when conversion of the
    matching source failed and the failure was isolated.
    """

    name: str
    payload: str | None
    source_name: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.payload is not None

    def payload_bytes(self) -> bytes | None:
        """Return the payload decoded to raw bytes."""
        if self.payload is None:
            return None
        return binary_string_to_bytes(self.payload)


@dataclass(frozen=True)
class ConversionRequest:
    """Unit of work handed to the sandbox: ordered sources plus resolution."""

    sources: tuple[SourceRecord, ...]
    resolution: int = DEFAULT_RESOLUTION

    @property
    def names(self) -> list[str]:
        return [source.name for source in self.sources]


@dataclass(frozen=True)
class PipelineResult:
    """Structured outcome of one batch run."""

    resolution: int
    discovered: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
