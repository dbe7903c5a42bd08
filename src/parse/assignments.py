"""Assignment-chain extraction from slithIR text.

Only the most recent ``target := source`` assignment per local is kept. This
is not a dataflow graph; it covers the "cache a state variable in a local"
pattern, e.g.::

    troveManagerCached(ITroveManager) := troveManager(ITroveManager)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

AssignmentMap = dict[str, str]

_ASSIGNMENT_LINE = re.compile(r"^\s*(\w+)\([^)]+\)\s*:=\s*(\w+)\(")


def parse_variable_assignments(ir_text: str) -> AssignmentMap:
    """Parse IR text into a target -> source variable mapping.

    Lines that are not of the shape ``name(Type) := name(Type)`` are skipped.
    A reassigned target keeps its last source in text order.
    """
    assignments: AssignmentMap = {}
    for line in ir_text.splitlines():
        match = _ASSIGNMENT_LINE.match(line)
        if match is None:
            continue
        target, source = match.group(1), match.group(2)
        assignments[target] = source
    return assignments


def parse_variable_assignments_by_caller(
    ir_by_caller: Mapping[str, str] | Iterable[tuple[str, str]],
) -> dict[str, AssignmentMap]:
    """Build one assignment map per caller address."""
    items = ir_by_caller.items() if isinstance(ir_by_caller, Mapping) else ir_by_caller
    return {address: parse_variable_assignments(text) for address, text in items}


__all__ = [
    "AssignmentMap",
    "parse_variable_assignments",
    "parse_variable_assignments_by_caller",
]
