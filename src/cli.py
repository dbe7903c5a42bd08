"""Command-line interface for calltarget."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from contract.validation import validate_artifacts
from discovery.loader import DiscoveryLoadError
from resolve.reporting import ThrottledReporter
from resolve.write import (
    generate_resolution_artifacts,
    generate_resolution_artifacts_async,
)
from rules.config import ConfigError, load_config
from verify.verify import verify_determinism


def _add_root(parser: argparse.ArgumentParser, *, positional: bool) -> None:
    if positional:
        parser.add_argument(
            "root",
            nargs="?",
            default=".",
            help="Project root (default: .)",
        )
        return
    parser.add_argument(
        "--root",
        default=".",
        help="Project root holding calltarget.toml (default: .)",
    )


def _add_inputs(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("discovered", help="Path to discovered.json snapshot")
    parser.add_argument("calls", help="Path to the call batch JSON file")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calltarget")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve call targets and write artifacts"
    )
    _add_inputs(resolve_parser)
    _add_root(resolve_parser, positional=False)
    resolve_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for resolution artifacts (default: config output dir)",
    )
    resolve_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print the per-heuristic decision trace to stderr",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    _add_root(validate_parser, positional=True)
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of resolution artifacts"
    )
    _add_inputs(verify_parser)
    _add_root(verify_parser, positional=False)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _write_trace_line(line: str) -> None:
    sys.stderr.write(f"{line}\n")


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_resolve(
    root: Path,
    discovered: str,
    calls: str,
    out_dir: str | None,
    verbose: bool,
) -> int:
    try:
        config = load_config(root)
        inputs = {
            "root": root,
            "discovered_path": Path(discovered).expanduser().resolve(),
            "calls_path": Path(calls).expanduser().resolve(),
            "out_dir": (
                Path(out_dir).expanduser().resolve() if out_dir is not None else None
            ),
            "config": config,
        }
        if verbose or config.trace.enabled:
            reporter = ThrottledReporter(
                _write_trace_line, every=config.trace.throttle_every
            )
            summary = asyncio.run(
                generate_resolution_artifacts_async(**inputs, on_progress=reporter)
            )
        else:
            summary = generate_resolution_artifacts(**inputs)
    except (ConfigError, DiscoveryLoadError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    sys.stdout.write(
        f"resolved {summary['resolved']}/{summary['total']} call(s), "
        f"{summary['unresolved']} unresolved\n"
    )
    return 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    try:
        resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        sys.stderr.write(f"{warning.location()}: warning: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(
    root: Path,
    discovered: str,
    calls: str,
    artifacts_dir: str | None,
) -> int:
    try:
        config = load_config(root)
        resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    try:
        result = verify_determinism(
            root=root,
            discovered_path=Path(discovered).expanduser().resolve(),
            calls_path=Path(calls).expanduser().resolve(),
            artifacts_dir=resolved_artifacts_dir,
            config=config,
        )
    except (FileNotFoundError, NotADirectoryError, DiscoveryLoadError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    root = Path(args.root).expanduser().resolve()
    _configure_logging(getattr(args, "verbose", False))

    if args.command == "resolve":
        return _handle_resolve(
            root, args.discovered, args.calls, args.out_dir, args.verbose
        )

    if args.command == "validate":
        return _handle_validate(root, args.artifacts_dir)

    if args.command == "verify":
        return _handle_verify(root, args.discovered, args.calls, args.artifacts_dir)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
