"""Async context manager for timing and logging pipeline steps."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from src.config.constants import PipelineStep, PipelineStepDescription
from src.infrastructure.logging.logger import StructuredLogger


class StepContext:
    """Mutable context for a timed pipeline step."""

    def __init__(self) -> None:
        self.summary: dict[str, Any] = {}
        self.elapsed_ms: float = 0.0

    def set_summary(self, **summary: Any) -> None:
        self.summary.update(summary)


@asynccontextmanager
async def timed_step(
    step: PipelineStep,
    logger: StructuredLogger,
    query_id: str,
) -> AsyncGenerator[StepContext, None]:
    """Time a pipeline step and log its summary; failures are logged and re-raised."""
    ctx = StepContext()
    start = time.perf_counter()
    try:
        yield ctx
    except Exception as e:
        ctx.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.log_error(step.value, e, context={"query_id": query_id})
        raise
    ctx.elapsed_ms = (time.perf_counter() - start) * 1000
    logger.log_step(
        step.value,
        {
            "query_id": query_id,
            "description": PipelineStepDescription[step.name].value,
            **ctx.summary,
        },
        duration_ms=ctx.elapsed_ms,
    )
