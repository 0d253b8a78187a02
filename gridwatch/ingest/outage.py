"""LUMA outage ingestion."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.engine import Engine

from gridwatch.db.writer import SnapshotWriter
from gridwatch.ingest import Source, load_sources
from gridwatch.ingest.archive import archive_snapshot
from gridwatch.ingest.client import SourceClient
from gridwatch.ingest.models import OutageSnapshot
from gridwatch.ingest.normalize import parse_outage
from gridwatch.utils.dates import resolve_timestamp

logger = logging.getLogger(__name__)


class OutageIngestor:
    def __init__(
        self,
        engine: Engine,
        client: SourceClient,
        *,
        source: Source | None = None,
        writer: SnapshotWriter | None = None,
    ) -> None:
        self.engine = engine
        self.client = client
        self.source = source or load_sources()["outage"]
        self.writer = writer or SnapshotWriter(engine)

    async def ingest(self) -> OutageSnapshot:
        body = await self.client.fetch(self.source.url)
        snapshot = parse_outage(body)
        snapshot.epoch = resolve_timestamp(snapshot.timestamp, self.source.timestamp_format)
        logger.info("Persisting %s regions for %s", len(snapshot.regions), snapshot.timestamp)
        await asyncio.get_running_loop().run_in_executor(None, self.writer.write, snapshot)
        archive_snapshot("outage", snapshot)
        return snapshot
