"""Interface-name heuristic: ``ITroveManager`` -> contract named ``TroveManager``."""

from __future__ import annotations

from heuristics.base import (
    HeuristicContext,
    HeuristicMatch,
    HeuristicResult,
    step_confidence,
)

_INTERFACE_PREFIX = "I"

_CONFIDENCE_BY_COUNT: dict[int, int] = {1: 90, 2: 60}
_CROWDED_CONFIDENCE = 40


def expected_contract_name(interface_type: str) -> str | None:
    """Strip the interface prefix, or return None when the convention doesn't apply."""
    if not interface_type.startswith(_INTERFACE_PREFIX):
        return None
    remainder = interface_type[len(_INTERFACE_PREFIX) :]
    return remainder or None


class InterfaceNameHeuristic:
    """Match the call's interface type to discovered contract names."""

    @property
    def name(self) -> str:
        return "interface-name"

    @property
    def description(self) -> str:
        return "Match interface name to contract name (strip I prefix)"

    def apply(self, context: HeuristicContext) -> HeuristicResult | None:
        expected = expected_contract_name(context.call.interface_type)
        if expected is None:
            return None

        wanted = expected.lower()
        matches = tuple(
            HeuristicMatch(address=entry.address, contract_name=entry.name)
            for entry in context.discovered.contracts()
            if (entry.name or "").lower() == wanted
        )
        if not matches:
            return None

        return HeuristicResult(
            matches=matches,
            confidence=step_confidence(
                len(matches), _CONFIDENCE_BY_COUNT, _CROWDED_CONFIDENCE
            ),
        )


__all__ = ["InterfaceNameHeuristic", "expected_contract_name"]
