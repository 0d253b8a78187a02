"""One ingestion cycle over both upstream sources."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from gridwatch.db.session import create_engine_from_env
from gridwatch.ingest.client import SourceClient
from gridwatch.ingest.generation import GenerationIngestor
from gridwatch.ingest.models import GenerationSnapshot, OutageSnapshot
from gridwatch.ingest.outage import OutageIngestor

logger = logging.getLogger(__name__)


async def run_update(
    engine: Engine | None = None, client: SourceClient | None = None
) -> tuple[OutageSnapshot, GenerationSnapshot]:
    owns_engine = engine is None
    engine = engine or create_engine_from_env()
    client = client or SourceClient()
    try:
        outage = await OutageIngestor(engine, client).ingest()
        generation = await GenerationIngestor(engine, client).ingest()
    finally:
        await client.close()
        if owns_engine:
            engine.dispose()
    logger.info("Inserted %s", generation.timestamp)
    return outage, generation

