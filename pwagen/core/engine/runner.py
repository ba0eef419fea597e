"""
Pipeline runner — execute named steps one after another.

Each step is a coroutine taking the run's PipelineContext. The runner
awaits them in order, records a StageRecord per step, and stops at the
first failure:

    step 1 → step 2 → ... → step N          (report returned)
    step 1 → step 2 ✗                       (GenerationError raised)

A failing step's exception is wrapped in the step's error class, tagged
with the stage, and chained to the original. Steps after it never run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pwagen.core.errors import GenerationError
from pwagen.core.models.pipeline import PipelineContext, PipelineReport, Stage, StageRecord

logger = logging.getLogger(__name__)

StepFunc = Callable[[PipelineContext], Awaitable[Any]]


@dataclass(frozen=True)
class PipelineStep:
    """A named pipeline step.

    Attributes:
        stage:   Stage this step implements.
        run:     Coroutine function; its return value (if any) becomes the
                 record's detail.
        error:   Error class used to wrap unexpected failures.
        message: Message for wrapped failures.
    """

    stage: Stage
    run: StepFunc
    error: type[GenerationError] = GenerationError
    message: str = ""

    def failure_message(self) -> str:
        return self.message or f"The {self.stage.value} step failed."


def _wrap(step: PipelineStep, exc: Exception) -> GenerationError:
    if isinstance(exc, GenerationError):
        if exc.stage is None:
            exc.stage = step.stage
        return exc
    return step.error(step.failure_message(), exc, stage=step.stage)


async def run_pipeline(
    steps: list[PipelineStep],
    ctx: PipelineContext,
    report: PipelineReport | None = None,
) -> PipelineReport:
    """Run ``steps`` in order against ``ctx``.

    Args:
        steps: Ordered steps.
        ctx: The run's context.
        report: Report to append to (created when omitted).

    Returns:
        The report, once every step succeeded.

    Raises:
        GenerationError: The first failure, with ``stage`` set.
    """
    report = report if report is not None else PipelineReport()

    for step in steps:
        start = time.monotonic()
        try:
            detail = await step.run(ctx)
        except Exception as e:
            error = _wrap(step, e)
            report.records.append(
                StageRecord(
                    stage=step.stage,
                    status="failed",
                    duration_ms=int((time.monotonic() - start) * 1000),
                    error=str(error),
                )
            )
            logger.error("✗ %s", error, extra={"stage": step.stage.value})
            if error is e:
                raise
            raise error from e

        report.records.append(
            StageRecord(
                stage=step.stage,
                duration_ms=int((time.monotonic() - start) * 1000),
                detail="" if detail is None else str(detail),
            )
        )
        logger.info("✓ done", extra={"stage": step.stage.value})

    return report
