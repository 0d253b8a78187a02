"""Evaluate upstream data-as-script payloads in an embedded V8 context."""

from __future__ import annotations

import logging

from py_mini_racer import MiniRacer
from py_mini_racer._exc import MiniRacerBaseException

from gridwatch.ingest.errors import EvaluationError

logger = logging.getLogger(__name__)

GENERATION_VARIABLES = (
    "dataFechaAcualizado",
    "dataFuelCost",
    "dataByFuel",
    "dataMetrics",
    "dataLoadPerSite",
)

GENERATION_EPILOGUE = "JSON.stringify({%s});" % ", ".join(GENERATION_VARIABLES)


class ScriptSandbox:
    """Runs third-party script text and serializes the variables it defines.

    Each call gets a fresh V8 context, which exposes no filesystem, network
    or process bindings; nothing survives between evaluations.
    """

    def __init__(self, epilogue: str = GENERATION_EPILOGUE) -> None:
        self.epilogue = epilogue

    def evaluate(self, script: str) -> str:
        cleaned = script.replace("\n", "").replace("\t", "")
        source = f"{cleaned} {self.epilogue}"
        logger.debug("Evaluating %s characters of upstream script", len(cleaned))
        ctx = MiniRacer()
        try:
            result = ctx.eval(source)
            return result if isinstance(result, str) else str(result)
        except MiniRacerBaseException as exc:
            raise EvaluationError(f"script evaluation failed: {exc}") from exc
        finally:
            ctx.close()
