"""Batch call-target resolution and artifact writing."""

from resolve.batch import (
    BatchResult,
    iter_call_contexts,
    resolve_batch,
    resolve_batch_async,
)
from resolve.reporting import ThrottledReporter
from resolve.write import (
    generate_resolution_artifacts,
    generate_resolution_artifacts_async,
    write_resolutions,
)

__all__ = [
    "BatchResult",
    "ThrottledReporter",
    "generate_resolution_artifacts",
    "generate_resolution_artifacts_async",
    "iter_call_contexts",
    "resolve_batch",
    "resolve_batch_async",
    "write_resolutions",
]
