"""Parsing utilities for slithIR text and ABI signatures."""

from parse.abi import exposes_function, extract_function_name, is_function_entry
from parse.assignments import (
    AssignmentMap,
    parse_variable_assignments,
    parse_variable_assignments_by_caller,
)

__all__ = [
    "AssignmentMap",
    "exposes_function",
    "extract_function_name",
    "is_function_entry",
    "parse_variable_assignments",
    "parse_variable_assignments_by_caller",
]
