"""Resolution output models consumed by the call-graph builder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION
from discovery.models import ExternalCall


class ResolutionCandidate(BaseModel):
    """A resolved target address with its contract name when known."""

    model_config = ConfigDict(frozen=True)

    address: str
    contract_name: str | None = None


class ResolutionDecision(BaseModel):
    """Winning heuristic for one call site."""

    model_config = ConfigDict(frozen=True)

    heuristic_name: str
    matches: tuple[ResolutionCandidate, ...]
    confidence: int = Field(ge=0, le=100)


class ResolutionRecord(BaseModel):
    """Schema for resolutions.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    caller_address: str
    call: ExternalCall
    resolved: bool
    decision: ResolutionDecision | None = None


class ResolutionSummary(BaseModel):
    """Schema for resolution_summary.json."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    total: int
    resolved: int
    unresolved: int
    by_heuristic: dict[str, int] = Field(default_factory=dict)
    cancelled: bool = False


__all__ = [
    "ResolutionCandidate",
    "ResolutionDecision",
    "ResolutionRecord",
    "ResolutionSummary",
]
