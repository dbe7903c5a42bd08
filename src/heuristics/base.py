"""Shared types for call-target resolution heuristics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from discovery.models import DiscoveryOutput, ExternalCall

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100

# Number of leading address characters shown when a match has no name.
_ADDRESS_LABEL_LENGTH = 14


@dataclass(frozen=True)
class HeuristicMatch:
    """A candidate target contract."""

    address: str
    contract_name: str | None = None

    def label(self) -> str:
        return self.contract_name or self.address[:_ADDRESS_LABEL_LENGTH]


@dataclass(frozen=True)
class HeuristicResult:
    """Non-empty ordered candidates plus a confidence score in [0, 100]."""

    matches: tuple[HeuristicMatch, ...]
    confidence: int

    def __post_init__(self) -> None:
        if not self.matches:
            msg = "HeuristicResult requires at least one match"
            raise ValueError(msg)
        if not MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE:
            msg = (
                f"confidence must be within [{MIN_CONFIDENCE}, {MAX_CONFIDENCE}], "
                f"got {self.confidence}"
            )
            raise ValueError(msg)


@dataclass(frozen=True)
class HeuristicContext:
    """Read-only input for resolving one call site."""

    call: ExternalCall
    caller_address: str
    discovered: DiscoveryOutput
    assignments: Mapping[str, str]


class ResolutionHeuristic(Protocol):
    """An independent strategy guessing which contract a call targets.

    ``apply`` returns None when the heuristic has no evidence; it never
    raises for missing contracts, ABIs or state values.
    """

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    def apply(self, context: HeuristicContext) -> HeuristicResult | None: ...


def step_confidence(
    match_count: int,
    table: Mapping[int, int],
    crowded: int,
) -> int:
    """Look up a fixed confidence for ``match_count``, ``crowded`` past the table."""
    return table.get(match_count, crowded)


__all__ = [
    "MAX_CONFIDENCE",
    "MIN_CONFIDENCE",
    "HeuristicContext",
    "HeuristicMatch",
    "HeuristicResult",
    "ResolutionHeuristic",
    "step_confidence",
]
