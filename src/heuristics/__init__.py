"""Call-target resolution heuristics and the engine that ranks them."""

from heuristics.base import (
    HeuristicContext,
    HeuristicMatch,
    HeuristicResult,
    ResolutionHeuristic,
)
from heuristics.engine import HeuristicEngine, create_heuristic_engine
from heuristics.function_signature import FunctionSignatureHeuristic
from heuristics.interface_name import InterfaceNameHeuristic
from heuristics.registry import DEFAULT_HEURISTIC_ORDER, build_heuristics
from heuristics.variable_chain import VariableChainHeuristic, follow_assignment_chain

__all__ = [
    "DEFAULT_HEURISTIC_ORDER",
    "FunctionSignatureHeuristic",
    "HeuristicContext",
    "HeuristicEngine",
    "HeuristicMatch",
    "HeuristicResult",
    "InterfaceNameHeuristic",
    "ResolutionHeuristic",
    "VariableChainHeuristic",
    "build_heuristics",
    "create_heuristic_engine",
    "follow_assignment_chain",
]
