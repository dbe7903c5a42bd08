"""Variable-chain heuristic: follow local assignments back to a state variable."""

from __future__ import annotations

from typing import TYPE_CHECKING

from heuristics.base import HeuristicContext, HeuristicMatch, HeuristicResult

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_ADDRESS_PREFIX = "eth:"
MAX_CHAIN_HOPS = 10

# A direct chain to a recorded state value is treated as ground truth.
_CHAIN_CONFIDENCE = 100


def follow_assignment_chain(
    variable: str,
    assignments: Mapping[str, str],
    max_hops: int = MAX_CHAIN_HOPS,
) -> str:
    """Walk target -> source links starting at ``variable``.

    Stops at the first name without a recorded source, or after ``max_hops``
    links. Cyclic maps therefore terminate and yield whatever name was
    reached last.
    """
    current = variable
    hops = 0
    while hops < max_hops:
        source = assignments.get(current)
        if source is None:
            break
        current = source
        hops += 1
    return current


class VariableChainHeuristic:
    """Resolve ``localCached`` to the address stored in its root state variable.

    Example: ``troveManagerCached := troveManager`` and the caller's recorded
    ``troveManager`` value is ``eth:0x...``.
    """

    def __init__(self, address_prefix: str = DEFAULT_ADDRESS_PREFIX) -> None:
        self._address_prefix = address_prefix

    @property
    def name(self) -> str:
        return "variable-chain"

    @property
    def description(self) -> str:
        return "Follow variable assignment chain to state variable"

    def apply(self, context: HeuristicContext) -> HeuristicResult | None:
        start = context.call.storage_variable
        resolved = follow_assignment_chain(start, context.assignments)
        if resolved == start:
            return None

        caller = context.discovered.find_entry(
            context.caller_address, contracts_only=True
        )
        if caller is None or not caller.values:
            return None

        value = caller.values.get(resolved)
        if not isinstance(value, str) or not value.startswith(self._address_prefix):
            return None

        target = context.discovered.find_entry(value)
        return HeuristicResult(
            matches=(
                HeuristicMatch(
                    address=value,
                    contract_name=target.name if target is not None else None,
                ),
            ),
            confidence=_CHAIN_CONFIDENCE,
        )


__all__ = [
    "DEFAULT_ADDRESS_PREFIX",
    "MAX_CHAIN_HOPS",
    "VariableChainHeuristic",
    "follow_assignment_chain",
]
