"""End-to-end pipeline behaviour with a fake conversion oracle."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from hdr_to_env.api import convert_directory
from hdr_to_env.application.use_cases import build_pipeline_config, run_pipeline
from hdr_to_env.errors import ConversionError


def _snapshot(directory: Path) -> dict[str, bytes]:
    return {path.name: path.read_bytes() for path in sorted(directory.iterdir())}


def test_sky_and_notes_produce_only_sky_env(hdr_dir: Path, fake_factory) -> None:
    """``sky.hdr`` + ``notes.txt`` at 128 yields exactly one new ``sky.env``."""
    before = _snapshot(hdr_dir)

    result = convert_directory(hdr_dir, resolution=128, sandbox_factory=fake_factory)

    after = _snapshot(hdr_dir)
    assert set(after) - set(before) == {"sky.env"}
    assert after["notes.txt"] == before["notes.txt"]
    assert result.discovered == ["sky.hdr"]
    assert result.written == [hdr_dir / "sky.env"]
    assert fake_factory.oracle.calls == [("sky.hdr", 128)]
    assert after["sky.env"].startswith(b"ENV\x00\x80")


def test_no_hdr_files_writes_nothing(tmp_path: Path, fake_factory) -> None:
    (tmp_path / "notes.txt").write_text("x")

    result = convert_directory(tmp_path, sandbox_factory=fake_factory)

    assert result.discovered == []
    assert result.written == []
    assert _snapshot(tmp_path) == {"notes.txt": b"x"}


def test_resolution_defaults_to_256(hdr_dir: Path, fake_factory) -> None:
    result = convert_directory(hdr_dir, sandbox_factory=fake_factory)

    assert result.resolution == 256
    assert fake_factory.oracle.calls == [("sky.hdr", 256)]


def test_at_most_one_output_per_input(tmp_path: Path, make_factory) -> None:
    """N inputs give N outputs, minus failed ones, and nothing else."""
    for name in ("a.hdr", "b.hdr", "c.HDR"):
        (tmp_path / name).write_bytes(name.encode())
    factory = make_factory(fail_on={"b.hdr"})

    result = convert_directory(
        tmp_path, failure_policy="continue", sandbox_factory=factory
    )

    new_files = set(_snapshot(tmp_path)) - {"a.hdr", "b.hdr", "c.HDR"}
    assert new_files == {"a.env", "c.env"}
    assert result.skipped == ["b.env"]
    assert set(result.failed) == {"b.hdr"}


def test_rerun_is_idempotent(hdr_dir: Path, fake_factory) -> None:
    convert_directory(hdr_dir, sandbox_factory=fake_factory)
    first = (hdr_dir / "sky.env").read_bytes()

    convert_directory(hdr_dir, sandbox_factory=fake_factory)

    assert (hdr_dir / "sky.env").read_bytes() == first


def test_separate_output_directory(hdr_dir: Path, tmp_path: Path, fake_factory) -> None:
    out_dir = tmp_path / "envs"
    config = build_pipeline_config(input_dir=hdr_dir, output_dir=out_dir)

    result = asyncio.run(run_pipeline(config, sandbox_factory=fake_factory))

    assert result.written == [out_dir / "sky.env"]
    assert not (hdr_dir / "sky.env").exists()


def test_discovery_is_reported_before_the_sandbox_starts(
    hdr_dir: Path, make_factory
) -> None:
    """``on_discovered`` fires before bootstrap, even if conversion then fails."""
    factory = make_factory(fail_on={"sky.hdr"})
    seen: list[tuple[list[str], int, int]] = []
    config = build_pipeline_config(input_dir=hdr_dir, resolution=64)

    def on_discovered(request) -> None:
        seen.append((request.names, request.resolution, factory.entered))

    with pytest.raises(ConversionError):
        asyncio.run(
            run_pipeline(config, sandbox_factory=factory, on_discovered=on_discovered)
        )

    assert seen == [(["sky.hdr"], 64, 0)]
    assert factory.entered == factory.exited == 1


def test_empty_discovery_is_still_reported(tmp_path: Path, fake_factory) -> None:
    seen = []
    config = build_pipeline_config(input_dir=tmp_path)

    asyncio.run(
        run_pipeline(config, sandbox_factory=fake_factory, on_discovered=seen.append)
    )

    assert [request.names for request in seen] == [[]]
    assert fake_factory.entered == 0
