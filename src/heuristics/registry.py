"""Name -> factory registry for the built-in heuristics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from heuristics.function_signature import FunctionSignatureHeuristic
from heuristics.interface_name import InterfaceNameHeuristic
from heuristics.variable_chain import DEFAULT_ADDRESS_PREFIX, VariableChainHeuristic

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from heuristics.base import ResolutionHeuristic

HEURISTIC_FACTORIES: dict[str, Callable[[str], ResolutionHeuristic]] = {
    "variable-chain": lambda address_prefix: VariableChainHeuristic(address_prefix),
    "interface-name": lambda address_prefix: InterfaceNameHeuristic(),
    "function-signature": lambda address_prefix: FunctionSignatureHeuristic(),
}

# Most deterministic evidence first; earlier registration wins confidence ties.
DEFAULT_HEURISTIC_ORDER: tuple[str, ...] = (
    "variable-chain",
    "interface-name",
    "function-signature",
)

KNOWN_HEURISTICS = frozenset(HEURISTIC_FACTORIES)


def build_heuristics(
    names: Iterable[str] = DEFAULT_HEURISTIC_ORDER,
    address_prefix: str = DEFAULT_ADDRESS_PREFIX,
) -> list[ResolutionHeuristic]:
    """Instantiate heuristics in the given order."""
    heuristics: list[ResolutionHeuristic] = []
    for name in names:
        factory = HEURISTIC_FACTORIES.get(name)
        if factory is None:
            msg = (
                f"Unknown heuristic '{name}'. "
                f"Valid heuristics: {', '.join(sorted(KNOWN_HEURISTICS))}"
            )
            raise ValueError(msg)
        heuristics.append(factory(address_prefix))
    return heuristics


__all__ = [
    "DEFAULT_HEURISTIC_ORDER",
    "HEURISTIC_FACTORIES",
    "KNOWN_HEURISTICS",
    "build_heuristics",
]
