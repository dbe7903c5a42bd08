from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from contract.artifacts import RESOLUTION_SUMMARY_JSON, RESOLUTIONS_JSONL
from discovery.loader import load_call_batch, load_discovery
from heuristics.engine import create_heuristic_engine
from resolve.batch import resolve_batch, resolve_batch_async
from rules.config import load_config, resolve_output_dir

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from discovery.loader import CallBatch
    from discovery.models import DiscoveryOutput
    from heuristics.engine import (
        AsyncProgressCallback,
        HeuristicEngine,
        ProgressCallback,
    )
    from pydantic import BaseModel
    from resolve.batch import BatchResult
    from rules.config import ResolverConfig


def _write_jsonl(path: Path, records: Sequence[BaseModel]) -> None:
    with path.open("wb") as f:
        for rec in records:
            payload = rec.model_dump(mode="json")
            f.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


def _write_json(path: Path, obj: BaseModel) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(obj.model_dump(mode="json"), option=opts))


def write_resolutions(out_dir: Path, result: BatchResult) -> list[Path]:
    """Write resolutions.jsonl and resolution_summary.json into ``out_dir``."""
    out_dir.mkdir(parents=True, exist_ok=True)

    records_path = out_dir / RESOLUTIONS_JSONL
    summary_path = out_dir / RESOLUTION_SUMMARY_JSON
    _write_jsonl(records_path, result.records)
    _write_json(summary_path, result.summary())
    return [records_path, summary_path]


def _prepare(
    root: Path,
    discovered_path: Path,
    calls_path: Path,
    out_dir: Path | None,
    config: ResolverConfig | None,
) -> tuple[Path, DiscoveryOutput, CallBatch, HeuristicEngine]:
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    discovered = load_discovery(discovered_path)
    batch = load_call_batch(calls_path)
    return out_dir, discovered, batch, create_heuristic_engine(config)


def _finish(out_dir: Path, result: BatchResult) -> dict[str, object]:
    written = write_resolutions(out_dir, result)
    summary = result.summary()

    return {
        "total": summary.total,
        "resolved": summary.resolved,
        "unresolved": summary.unresolved,
        "artifacts": [str(path) for path in written],
    }


def generate_resolution_artifacts(
    *,
    root: Path,
    discovered_path: Path,
    calls_path: Path,
    out_dir: Path | None = None,
    config: ResolverConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> dict[str, object]:
    """Resolve a call batch against a discovery snapshot and write artifacts.

    Args:
        root: Project root (config lookup and default output directory)
        discovered_path: discovered.json snapshot of the contract graph
        calls_path: Call batch file with per-caller IR and call sites
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration; loaded from ``root`` when omitted
        on_progress: Optional trace callback, one call per trace line

    Returns:
        Dictionary with resolution counts and list of written artifact paths.
    """
    out_dir, discovered, batch, engine = _prepare(
        root, discovered_path, calls_path, out_dir, config
    )
    result = resolve_batch(engine, discovered, batch, on_progress=on_progress)
    return _finish(out_dir, result)


async def generate_resolution_artifacts_async(
    *,
    root: Path,
    discovered_path: Path,
    calls_path: Path,
    out_dir: Path | None = None,
    config: ResolverConfig | None = None,
    on_progress: AsyncProgressCallback | None = None,
) -> dict[str, object]:
    """Same as ``generate_resolution_artifacts`` with an awaited trace callback."""
    out_dir, discovered, batch, engine = _prepare(
        root, discovered_path, calls_path, out_dir, config
    )
    result = await resolve_batch_async(
        engine, discovered, batch, on_progress=on_progress
    )
    return _finish(out_dir, result)


__all__ = [
    "generate_resolution_artifacts",
    "generate_resolution_artifacts_async",
    "write_resolutions",
]
