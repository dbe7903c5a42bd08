"""Batch resolution of every unresolved call site in a project.

Each call is resolved as one atomic unit. Cancellation is only checked
between calls, never while the heuristics for a call are running.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from contract.models import (
    ResolutionDecision,
    ResolutionRecord,
    ResolutionSummary,
)
from heuristics.base import HeuristicContext
from parse.assignments import parse_variable_assignments_by_caller

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from discovery.loader import CallBatch
    from discovery.models import DiscoveryOutput
    from heuristics.engine import (
        AsyncProgressCallback,
        HeuristicEngine,
        ProgressCallback,
    )


@dataclass(frozen=True)
class BatchResult:
    """Ordered resolution records; ``cancelled`` marks a partial batch."""

    records: tuple[ResolutionRecord, ...]
    cancelled: bool = False

    def summary(self) -> ResolutionSummary:
        by_heuristic = Counter(
            record.decision.heuristic_name
            for record in self.records
            if record.decision is not None
        )
        resolved = sum(by_heuristic.values())
        return ResolutionSummary(
            total=len(self.records),
            resolved=resolved,
            unresolved=len(self.records) - resolved,
            by_heuristic=dict(sorted(by_heuristic.items())),
            cancelled=self.cancelled,
        )


def iter_call_contexts(
    discovered: DiscoveryOutput, batch: CallBatch
) -> Iterator[HeuristicContext]:
    """Yield one context per call; IR is parsed once per caller."""
    assignments_by_caller = parse_variable_assignments_by_caller(
        (caller.address, caller.ir) for caller in batch.callers
    )
    for caller in batch.callers:
        assignments = assignments_by_caller[caller.address]
        for call in caller.calls:
            yield HeuristicContext(
                call=call,
                caller_address=caller.address,
                discovered=discovered,
                assignments=assignments,
            )


def _to_record(
    context: HeuristicContext, decision: ResolutionDecision | None
) -> ResolutionRecord:
    return ResolutionRecord(
        caller_address=context.caller_address,
        call=context.call,
        resolved=decision is not None,
        decision=decision,
    )


def _log_summary(result: BatchResult) -> None:
    summary = result.summary()
    if result.cancelled:
        logger.warning(
            f"Resolution cancelled after {summary.total} call(s) "
            f"({summary.resolved} resolved)"
        )
        return
    logger.info(
        f"Resolved {summary.resolved}/{summary.total} call(s); "
        f"{summary.unresolved} left unresolved"
    )


def resolve_batch(
    engine: HeuristicEngine,
    discovered: DiscoveryOutput,
    batch: CallBatch,
    *,
    on_progress: ProgressCallback | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> BatchResult:
    """Resolve every call in ``batch`` with synchronous trace delivery."""
    records: list[ResolutionRecord] = []
    cancelled = False
    for context in iter_call_contexts(discovered, batch):
        if should_cancel is not None and should_cancel():
            cancelled = True
            break
        decision = engine.resolve(context, on_progress)
        records.append(_to_record(context, decision))

    result = BatchResult(records=tuple(records), cancelled=cancelled)
    _log_summary(result)
    return result


async def resolve_batch_async(
    engine: HeuristicEngine,
    discovered: DiscoveryOutput,
    batch: CallBatch,
    *,
    on_progress: AsyncProgressCallback | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> BatchResult:
    """Resolve every call in ``batch``, awaiting the trace callback per line."""
    records: list[ResolutionRecord] = []
    cancelled = False
    for context in iter_call_contexts(discovered, batch):
        if should_cancel is not None and should_cancel():
            cancelled = True
            break
        decision = await engine.resolve_async(context, on_progress)
        records.append(_to_record(context, decision))

    result = BatchResult(records=tuple(records), cancelled=cancelled)
    _log_summary(result)
    return result


__all__ = [
    "BatchResult",
    "iter_call_contexts",
    "resolve_batch",
    "resolve_batch_async",
]
