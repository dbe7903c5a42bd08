"""Resolution artifact contract definitions.

This module defines the stable boundary between the resolver and the
call-graph builder that consumes its output.
"""

from __future__ import annotations

from dataclasses import dataclass

# Artifact schema version for resolution artifacts.
ARTIFACT_SCHEMA_VERSION = 1

# Artifact filename constants (stable contract identifiers).
RESOLUTIONS_JSONL = "resolutions.jsonl"
RESOLUTION_SUMMARY_JSON = "resolution_summary.json"


@dataclass(frozen=True)
class ArtifactSpec:
    """Specification for a resolution artifact file."""

    filename: str
    format: str


RESOLUTION_ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "resolutions": ArtifactSpec(
        filename=RESOLUTIONS_JSONL,
        format="jsonl",
    ),
    "summary": ArtifactSpec(
        filename=RESOLUTION_SUMMARY_JSON,
        format="json",
    ),
}


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "RESOLUTIONS_JSONL",
    "RESOLUTION_ARTIFACT_SPECS",
    "RESOLUTION_SUMMARY_JSON",
    "ArtifactSpec",
]
