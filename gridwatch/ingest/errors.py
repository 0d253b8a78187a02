"""Ingestion error taxonomy."""

from __future__ import annotations


class IngestError(RuntimeError):
    """A fatal failure in one stage of an ingestion run."""

    stage = "ingest"


class TransportError(IngestError):
    stage = "fetch"


class EvaluationError(IngestError):
    stage = "evaluate"


class ParseError(IngestError):
    stage = "parse"


class TimeResolutionError(IngestError):
    stage = "resolve"


class PersistenceError(IngestError):
    stage = "persist"
