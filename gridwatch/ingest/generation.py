"""PREPA generation ingestion."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.engine import Engine

from gridwatch.db.writer import SnapshotWriter
from gridwatch.ingest import Source, load_sources
from gridwatch.ingest.archive import archive_snapshot
from gridwatch.ingest.client import SourceClient
from gridwatch.ingest.models import GenerationSnapshot
from gridwatch.ingest.normalize import parse_generation
from gridwatch.ingest.sandbox import ScriptSandbox
from gridwatch.utils.dates import resolve_timestamp

logger = logging.getLogger(__name__)


class GenerationIngestor:
    """Fetches dataSource.js, evaluates it and persists the resulting frame."""

    def __init__(
        self,
        engine: Engine,
        client: SourceClient,
        *,
        source: Source | None = None,
        sandbox: ScriptSandbox | None = None,
        writer: SnapshotWriter | None = None,
    ) -> None:
        self.engine = engine
        self.client = client
        self.source = source or load_sources()["generation"]
        self.sandbox = sandbox or ScriptSandbox()
        self.writer = writer or SnapshotWriter(engine)

    async def ingest(self) -> GenerationSnapshot:
        script = await self.client.fetch(self.source.url)
        snapshot = parse_generation(self.sandbox.evaluate(script))
        snapshot.epoch = resolve_timestamp(snapshot.timestamp, self.source.timestamp_format)
        logger.info(
            "Persisting generation frame for %s (%s sites)", snapshot.timestamp, len(snapshot.load_per_site)
        )
        await asyncio.get_running_loop().run_in_executor(None, self.writer.write, snapshot)
        archive_snapshot("generation", snapshot)
        return snapshot
