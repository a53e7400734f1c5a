"""Input discovery: select HDR files in a directory and encode them."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from hdr_to_env.application.results import SourceRecord
from hdr_to_env.codec import derive_env_name, encode_data_url, is_hdr_path
from hdr_to_env.errors import DiscoveryError

logger = logging.getLogger(__name__)


def list_candidates(input_dir: Path) -> list[Path]:
    """Return regular files in ``input_dir`` whose name matches the HDR rule.

    Only the entry name is tested, never the scan root: inside a directory
    named ``pack.hdr`` a ``notes.txt`` is not selected.

    Parameters
    ----------
    input_dir : Path
        Directory to scan (not recursive).

    Returns
    -------
    list[Path]
        Matching file paths sorted by name.

    Raises
    ------
    DiscoveryError
        If the directory cannot be listed.
    """
    try:
        entries = sorted(input_dir.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise DiscoveryError(f"Cannot scan input directory {input_dir}: {exc}") from exc

    candidates: list[Path] = []
    for entry in entries:
        if not is_hdr_path(entry.name):
            continue
        if entry.is_dir():
            logger.debug("skipping directory with HDR-like name: %s", entry.name)
            continue
        candidates.append(entry)
    return candidates


def check_output_collisions(names: list[str]) -> None:
    """Raise if an output name is shared by two sources or overwrites a source.

    Names are compared exactly: ``sky.hdr`` and ``SKY.hdr`` derive the
    distinct targets ``sky.env`` and ``SKY.env``.
    """
    inputs = set(names)
    seen: dict[str, str] = {}
    for name in names:
        target = derive_env_name(name)
        if target in inputs:
            raise DiscoveryError(
                f"Output of '{name}' would overwrite the input file '{target}'."
            )
        if target in seen:
            raise DiscoveryError(
                f"Inputs '{seen[target]}' and '{name}' would both be written to '{target}'."
            )
        seen[target] = name


async def _read_source(path: Path) -> SourceRecord:
    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise DiscoveryError(f"Cannot read {path}: {exc}") from exc
    logger.debug("read %s (%d bytes)", path.name, len(data))
    return SourceRecord(name=path.name, payload=encode_data_url(data))


async def discover_sources(input_dir: Path) -> list[SourceRecord]:
    """Discover and encode every HDR file in ``input_dir``.

    All reads run concurrently; the first read failure aborts discovery.
    """
    candidates = list_candidates(input_dir)
    check_output_collisions([path.name for path in candidates])
    sources = await asyncio.gather(*(_read_source(path) for path in candidates))
    logger.info("discovered %d HDR file(s) in %s", len(sources), input_dir)
    return list(sources)
