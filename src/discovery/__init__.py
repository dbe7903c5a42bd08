"""Discovered-contract graph models and loaders."""

from discovery.loader import (
    CallBatch,
    CallerBatch,
    DiscoveryLoadError,
    load_call_batch,
    load_discovery,
)
from discovery.models import (
    CONTRACT_ENTRY_TYPE,
    DiscoveredEntry,
    DiscoveryOutput,
    ExternalCall,
)

__all__ = [
    "CONTRACT_ENTRY_TYPE",
    "CallBatch",
    "CallerBatch",
    "DiscoveredEntry",
    "DiscoveryLoadError",
    "DiscoveryOutput",
    "ExternalCall",
    "load_call_batch",
    "load_discovery",
]
