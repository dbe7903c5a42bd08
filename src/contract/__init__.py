"""Stable resolver -> call-graph contract surface.

Treat these exports as the authoritative boundary for downstream consumers
of resolution artifacts.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    RESOLUTION_ARTIFACT_SPECS,
    RESOLUTION_SUMMARY_JSON,
    RESOLUTIONS_JSONL,
    ArtifactSpec,
)


def __getattr__(name: str) -> object:
    if name in {
        "ResolutionCandidate",
        "ResolutionDecision",
        "ResolutionRecord",
        "ResolutionSummary",
    }:
        from contract.models import (
            ResolutionCandidate,
            ResolutionDecision,
            ResolutionRecord,
            ResolutionSummary,
        )

        return {
            "ResolutionCandidate": ResolutionCandidate,
            "ResolutionDecision": ResolutionDecision,
            "ResolutionRecord": ResolutionRecord,
            "ResolutionSummary": ResolutionSummary,
        }[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "RESOLUTIONS_JSONL",
    "RESOLUTION_ARTIFACT_SPECS",
    "RESOLUTION_SUMMARY_JSON",
    "ArtifactSpec",
    "ResolutionCandidate",
    "ResolutionDecision",
    "ResolutionRecord",
    "ResolutionSummary",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
