"""Heuristic engine: run every registered heuristic and pick the most confident.

Both reporting modes drive the same step generator, which yields one trace
line at a time and returns the decision. ``resolve`` hands each line to a
plain callback; ``resolve_async`` awaits the callback so a long batch can
yield to the event loop between lines.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from contract.models import ResolutionCandidate, ResolutionDecision
from heuristics.registry import DEFAULT_HEURISTIC_ORDER, build_heuristics
from heuristics.variable_chain import DEFAULT_ADDRESS_PREFIX

if TYPE_CHECKING:
    from collections.abc import Iterable

    from heuristics.base import (
        HeuristicContext,
        HeuristicMatch,
        HeuristicResult,
        ResolutionHeuristic,
    )
    from rules.config import ResolverConfig

ProgressCallback = Callable[[str], None]
AsyncProgressCallback = Callable[[str], Awaitable[None]]

_ResolutionSteps = Generator[str, None, "ResolutionDecision | None"]

NO_WINNER_LINE = "      Result: no winner"


@dataclass(frozen=True)
class _RankedResult:
    """A heuristic result tagged with its heuristic's registration index."""

    registration_index: int
    heuristic_name: str
    result: HeuristicResult

    def sort_key(self) -> tuple[int, int]:
        return (-self.result.confidence, self.registration_index)


def _format_labels(matches: tuple[HeuristicMatch, ...]) -> str:
    return ", ".join(match.label() for match in matches)


def _to_decision(ranked: _RankedResult) -> ResolutionDecision:
    return ResolutionDecision(
        heuristic_name=ranked.heuristic_name,
        matches=tuple(
            ResolutionCandidate(
                address=match.address, contract_name=match.contract_name
            )
            for match in ranked.result.matches
        ),
        confidence=ranked.result.confidence,
    )


class HeuristicEngine:
    """Ordered collection of heuristics with a single resolution algorithm.

    Registration order is the tie-break among equally confident results:
    the heuristic registered first wins.
    """

    def __init__(self, heuristics: Iterable[ResolutionHeuristic] = ()) -> None:
        self._heuristics: list[ResolutionHeuristic] = []
        for heuristic in heuristics:
            self.register(heuristic)

    @property
    def heuristics(self) -> tuple[ResolutionHeuristic, ...]:
        return tuple(self._heuristics)

    def register(self, heuristic: ResolutionHeuristic) -> None:
        if any(existing.name == heuristic.name for existing in self._heuristics):
            msg = f"Heuristic '{heuristic.name}' is already registered"
            raise ValueError(msg)
        self._heuristics.append(heuristic)

    def _steps(self, context: HeuristicContext) -> _ResolutionSteps:
        call = context.call
        yield (
            f"    Resolving: {call.storage_variable} -> "
            f"{call.called_function}() [{call.interface_type}]"
        )

        ranked: list[_RankedResult] = []
        for index, heuristic in enumerate(self._heuristics):
            result = heuristic.apply(context)
            if result is None:
                yield f"      - {heuristic.name}: no match"
                continue
            ranked.append(_RankedResult(index, heuristic.name, result))
            yield (
                f"      - {heuristic.name}: {len(result.matches)} match(es) "
                f"[{_format_labels(result.matches)}] -> "
                f"confidence: {result.confidence}%"
            )

        if not ranked:
            yield NO_WINNER_LINE
            return None

        ranked.sort(key=_RankedResult.sort_key)
        winner = ranked[0]
        yield (
            f"      Winner: {winner.heuristic_name} ({winner.result.confidence}%) "
            f"-> {_format_labels(winner.result.matches)}"
        )
        return _to_decision(winner)

    def resolve(
        self,
        context: HeuristicContext,
        on_progress: ProgressCallback | None = None,
    ) -> ResolutionDecision | None:
        """Resolve one call site, emitting trace lines synchronously."""
        steps = self._steps(context)
        while True:
            try:
                line = next(steps)
            except StopIteration as stop:
                decision: ResolutionDecision | None = stop.value
                break
            if on_progress is not None:
                on_progress(line)
        _log_decision(context, decision)
        return decision

    async def resolve_async(
        self,
        context: HeuristicContext,
        on_progress: AsyncProgressCallback | None = None,
    ) -> ResolutionDecision | None:
        """Resolve one call site, awaiting the callback after every trace line."""
        steps = self._steps(context)
        while True:
            try:
                line = next(steps)
            except StopIteration as stop:
                decision: ResolutionDecision | None = stop.value
                break
            if on_progress is not None:
                await on_progress(line)
        _log_decision(context, decision)
        return decision


def _log_decision(
    context: HeuristicContext, decision: ResolutionDecision | None
) -> None:
    call = context.call
    if decision is None:
        logger.debug(
            f"Unresolved {context.caller_address}: "
            f"{call.storage_variable}.{call.called_function}()"
        )
        return
    logger.debug(
        f"Resolved {context.caller_address}: "
        f"{call.storage_variable}.{call.called_function}() via "
        f"{decision.heuristic_name} ({decision.confidence}%)"
    )


def create_heuristic_engine(config: ResolverConfig | None = None) -> HeuristicEngine:
    """Create an engine with the built-in heuristics registered.

    Default order is variable-chain, interface-name, function-signature.
    """
    if config is None:
        names: Iterable[str] = DEFAULT_HEURISTIC_ORDER
        address_prefix = DEFAULT_ADDRESS_PREFIX
    else:
        names = config.heuristics
        address_prefix = config.address_prefix
    return HeuristicEngine(build_heuristics(names, address_prefix))


__all__ = [
    "NO_WINNER_LINE",
    "AsyncProgressCallback",
    "HeuristicEngine",
    "ProgressCallback",
    "create_heuristic_engine",
]
