"""Function-signature heuristic: find contracts whose ABI exposes the called function."""

from __future__ import annotations

from heuristics.base import (
    HeuristicContext,
    HeuristicMatch,
    HeuristicResult,
    step_confidence,
)
from parse.abi import exposes_function

_CONFIDENCE_BY_COUNT: dict[int, int] = {1: 99, 2: 50}
_CROWDED_CONFIDENCE = 30


class FunctionSignatureHeuristic:
    """Match the called function name against every discovered contract's ABI."""

    @property
    def name(self) -> str:
        return "function-signature"

    @property
    def description(self) -> str:
        return "Match called function to contracts with that function in ABI"

    def apply(self, context: HeuristicContext) -> HeuristicResult | None:
        function_name = context.call.called_function
        discovered = context.discovered

        matches = tuple(
            HeuristicMatch(address=entry.address, contract_name=entry.name)
            for entry in discovered.contracts()
            if exposes_function(discovered.abi_for(entry.address), function_name)
        )
        if not matches:
            return None

        return HeuristicResult(
            matches=matches,
            confidence=step_confidence(
                len(matches), _CONFIDENCE_BY_COUNT, _CROWDED_CONFIDENCE
            ),
        )


__all__ = ["FunctionSignatureHeuristic"]
