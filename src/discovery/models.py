"""Discovered-contract graph and call-site models.

These mirror the shape of a discovery snapshot (``discovered.json``): an
ordered list of entries plus a per-address ABI table. Only entries of type
``Contract`` take part in call-target resolution.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CONTRACT_ENTRY_TYPE = "Contract"


class ExternalCall(BaseModel):
    """One call site whose target address is not a literal in the source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    storage_variable: str = Field(
        alias="storageVariable",
        description="Local or state variable the call target was read from",
    )
    interface_type: str = Field(
        alias="interfaceType",
        description="Declared interface/type name at the call site",
    )
    called_function: str = Field(
        alias="calledFunction",
        description="Name of the invoked function",
    )


class DiscoveredEntry(BaseModel):
    """A single node of the already-built contract graph."""

    model_config = ConfigDict(frozen=True)

    address: str
    name: str | None = None
    type: str | None = Field(
        default=None,
        description="Entry kind; only an explicit \"Contract\" is resolvable",
    )
    values: dict[str, Any] | None = None

    @property
    def is_contract(self) -> bool:
        return self.type == CONTRACT_ENTRY_TYPE


class DiscoveryOutput(BaseModel):
    """Full graph snapshot: entries in discovery order plus ABIs by address."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[DiscoveredEntry, ...] = ()
    abis: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    def contracts(self) -> list[DiscoveredEntry]:
        """Return the Contract entries, preserving graph order."""
        return [entry for entry in self.entries if entry.is_contract]

    def find_entry(
        self, address: str, *, contracts_only: bool = False
    ) -> DiscoveredEntry | None:
        """Find the first entry whose address matches case-insensitively."""
        wanted = address.lower()
        for entry in self.entries:
            if contracts_only and not entry.is_contract:
                continue
            if entry.address.lower() == wanted:
                return entry
        return None

    def abi_for(self, address: str) -> tuple[str, ...]:
        """Return the ABI recorded for ``address``, or an empty tuple."""
        abi = self.abis.get(address)
        if abi is not None:
            return abi
        wanted = address.lower()
        for key, candidate in self.abis.items():
            if key.lower() == wanted:
                return candidate
        return ()


__all__ = [
    "CONTRACT_ENTRY_TYPE",
    "DiscoveredEntry",
    "DiscoveryOutput",
    "ExternalCall",
]
