"""JSON archive of normalized snapshots."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from gridwatch.ingest.models import GenerationSnapshot, OutageSnapshot

logger = logging.getLogger(__name__)


def archive_dir() -> Path | None:
    value = os.environ.get("ARCHIVE_DIR")
    return Path(value) if value else None


def archive_snapshot(kind: str, snapshot: OutageSnapshot | GenerationSnapshot, *, output_dir: Path | None = None) -> Path | None:
    """Write ``snapshot`` with its write-side names to ``<dir>/<kind>-<epoch>.json``.

    Returns None without writing when no archive directory is configured.
    """
    output_dir = output_dir or archive_dir()
    if output_dir is None:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    file_path = output_dir / f"{kind}-{snapshot.epoch}.json"
    file_path.write_text(json.dumps(snapshot.to_payload(), indent=2, ensure_ascii=False))
    logger.info("Archived %s snapshot to %s", kind, file_path)
    return file_path
