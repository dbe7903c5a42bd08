"""Loading discovery snapshots and call batches from disk."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from discovery.models import DiscoveryOutput, ExternalCall

if TYPE_CHECKING:
    from pathlib import Path


class DiscoveryLoadError(Exception):
    """Raised when an input file exists but cannot be read or validated."""


class CallerBatch(BaseModel):
    """Unresolved calls of one caller contract together with its IR text."""

    model_config = ConfigDict(frozen=True)

    address: str
    ir: str = Field(default="", description="Raw slithIR text for the caller")
    calls: tuple[ExternalCall, ...] = ()


class CallBatch(BaseModel):
    """All unresolved call sites for one project."""

    model_config = ConfigDict(frozen=True)

    callers: tuple[CallerBatch, ...] = ()

    @field_validator("callers")
    @classmethod
    def validate_unique_callers(
        cls, v: tuple[CallerBatch, ...]
    ) -> tuple[CallerBatch, ...]:
        seen: set[str] = set()
        for caller in v:
            if caller.address in seen:
                msg = f"Caller '{caller.address}' is listed more than once"
                raise ValueError(msg)
            seen.add(caller.address)
        return v

    def call_count(self) -> int:
        return sum(len(caller.calls) for caller in self.callers)


def _read_json(path: Path) -> Any:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read {path}: {exc}"
        raise DiscoveryLoadError(msg) from exc
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise DiscoveryLoadError(msg) from exc


def _normalize_abis(data: dict[str, Any]) -> dict[str, Any]:
    """Drop non-list ABI values so a partially broken snapshot still loads."""
    abis = data.get("abis")
    if not isinstance(abis, dict):
        return data
    cleaned = {
        address: [sig for sig in abi if isinstance(sig, str)]
        for address, abi in abis.items()
        if isinstance(address, str) and isinstance(abi, list)
    }
    return {**data, "abis": cleaned}


def load_discovery(path: Path) -> DiscoveryOutput:
    """Load a ``discovered.json`` snapshot.

    Keys other than ``entries`` and ``abis`` are ignored, so full discovery
    outputs can be passed in unchanged.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}"
        raise DiscoveryLoadError(msg)

    data = _normalize_abis(data)
    try:
        return DiscoveryOutput.model_validate(
            {key: data[key] for key in ("entries", "abis") if key in data}
        )
    except ValidationError as exc:
        msg = f"Invalid discovery snapshot in {path}: {exc}"
        raise DiscoveryLoadError(msg) from exc


def load_call_batch(path: Path) -> CallBatch:
    """Load a call batch file: ``{"callers": [{"address", "ir", "calls"}]}``."""
    data = _read_json(path)
    try:
        return CallBatch.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid call batch in {path}: {exc}"
        raise DiscoveryLoadError(msg) from exc


__all__ = [
    "CallBatch",
    "CallerBatch",
    "DiscoveryLoadError",
    "load_call_batch",
    "load_discovery",
]
