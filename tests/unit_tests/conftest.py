"""Shared fakes for pipeline unit tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

from hdr_to_env.application.options import SandboxOptions
from hdr_to_env.application.results import SourceRecord
from hdr_to_env.codec import bytes_to_binary_string, decode_data_url
from hdr_to_env.errors import ConversionError

RADIANCE_BYTES = b"#?RADIANCE\nFORMAT=32-bit_rle_rgbe\n\n-Y 1 +X 1\n\x80\x80\x80\x81"


class FakeOracle:
    """Deterministic conversion oracle: ENV payload derived from the input bytes."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def convert(self, source: SourceRecord, resolution: int) -> str:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.calls.append((source.name, resolution))
            if source.name in self.fail_on:
                raise ConversionError(f"boom: {source.name}", source_name=source.name)
            raw = decode_data_url(source.payload)
            return bytes_to_binary_string(b"ENV" + resolution.to_bytes(2, "big") + raw)
        finally:
            self.in_flight -= 1


class FakeSandboxFactory:
    """Records sandbox lifecycle and yields a shared ``FakeOracle``."""

    def __init__(self, oracle: FakeOracle | None = None) -> None:
        self.oracle = oracle or FakeOracle()
        self.options: list[SandboxOptions] = []
        self.entered = 0
        self.exited = 0

    def __call__(self, options: SandboxOptions):
        self.options.append(options)
        return self._context()

    @asynccontextmanager
    async def _context(self) -> AsyncIterator[FakeOracle]:
        self.entered += 1
        try:
            yield self.oracle
        finally:
            self.exited += 1


@pytest.fixture
def fake_factory() -> FakeSandboxFactory:
    """Sandbox factory backed by a well-behaved oracle."""
    return FakeSandboxFactory()


@pytest.fixture
def make_factory():
    """Build a sandbox factory whose oracle fails for the given source names."""

    def _make(fail_on: set[str] | None = None) -> FakeSandboxFactory:
        return FakeSandboxFactory(FakeOracle(fail_on=fail_on))

    return _make


@pytest.fixture
def radiance_bytes() -> bytes:
    return RADIANCE_BYTES


@pytest.fixture
def hdr_dir(tmp_path: Path) -> Path:
    """Directory holding one HDR file and one unrelated text file."""
    (tmp_path / "sky.hdr").write_bytes(RADIANCE_BYTES)
    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path
