"""Persistence: write converted ENV payloads to disk."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from hdr_to_env.application.results import ResultRecord
from hdr_to_env.errors import PersistenceError

logger = logging.getLogger(__name__)


def _write_bytes(path: Path, data: bytes) -> Path:
    path.write_bytes(data)
    return path


async def _write_result(record: ResultRecord, output_dir: Path) -> Path:
    target = output_dir / record.name
    try:
        data = record.payload_bytes() or b""
    except ValueError as exc:
        raise PersistenceError(f"Cannot decode payload for {record.name}: {exc}") from exc
    try:
        await asyncio.to_thread(_write_bytes, target, data)
    except OSError as exc:
        raise PersistenceError(f"Cannot write {target}: {exc}") from exc
    logger.info("wrote %s (%d bytes)", target, len(data))
    return target


async def write_results(results: Sequence[ResultRecord], output_dir: Path) -> list[Path]:
    """Write every record with a payload into ``output_dir``.

    Records without a payload are skipped. Writes run concurrently and the
    first failure aborts the run.

    Returns
    -------
    list[Path]
        Written paths, in the order of ``results``.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PersistenceError(f"Cannot create output directory {output_dir}: {exc}") from exc

    pending = [record for record in results if record.payload is not None]
    for record in results:
        if record.payload is None:
            logger.debug("no payload for %s, skipping write", record.name)
    written = await asyncio.gather(*(_write_result(record, output_dir) for record in pending))
    return list(written)
