"""Validation helpers for resolution artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import orjson
from pydantic import ValidationError

from contract.artifacts import ARTIFACT_SCHEMA_VERSION, RESOLUTION_ARTIFACT_SPECS
from contract.models import ResolutionRecord, ResolutionSummary

if TYPE_CHECKING:
    from pathlib import Path


class _SchemaModel(Protocol):
    schema_version: int

    @classmethod
    def model_validate(cls, obj: Any) -> _SchemaModel: ...


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_artifacts(artifacts_dir: Path) -> ValidationResult:
    """Check that every resolution artifact exists and matches its schema."""
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    record_count: int | None = None
    for artifact_name, spec in RESOLUTION_ARTIFACT_SPECS.items():
        path = artifacts_dir / spec.filename
        if not path.exists():
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message="Required artifact file is missing.",
                )
            )
            continue

        if spec.format == "jsonl":
            record_count = _validate_jsonl(
                artifact_name, path, ResolutionRecord, result
            )
        elif spec.format == "json":
            summary = _validate_json(artifact_name, path, ResolutionSummary, result)
            if summary is not None:
                _check_summary_totals(
                    artifact_name, path, summary, record_count, result
                )
        else:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message=f"Unsupported artifact format: {spec.format}.",
                )
            )

    return result


def _validate_jsonl(
    artifact_name: str,
    path: Path,
    model: type[_SchemaModel],
    result: ValidationResult,
) -> int:
    try:
        handle = path.open("rb")
    except OSError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Failed to read file: {exc}.",
            )
        )
        return 0

    valid_records = 0
    mismatch_schema_emitted = False
    with handle:
        for line_number, raw_line in enumerate(handle, 1):
            line = raw_line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        line=line_number,
                        message=f"Invalid JSON: {exc}.",
                    )
                )
                continue

            try:
                record = model.model_validate(data)
            except ValidationError as exc:
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        line=line_number,
                        message=f"Schema validation failed: {exc}.",
                    )
                )
                continue

            valid_records += 1
            if (
                record.schema_version != ARTIFACT_SCHEMA_VERSION
                and not mismatch_schema_emitted
            ):
                _report_schema_mismatch(
                    artifact_name, path, line_number, record.schema_version, result
                )
                mismatch_schema_emitted = True

            if isinstance(record, ResolutionRecord) and (
                record.resolved != (record.decision is not None)
            ):
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        line=line_number,
                        message="'resolved' disagrees with presence of 'decision'.",
                    )
                )

    return valid_records


def _validate_json(
    artifact_name: str,
    path: Path,
    model: type[ResolutionSummary],
    result: ValidationResult,
) -> ResolutionSummary | None:
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return None

    if not isinstance(raw, dict):
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Expected JSON object for {path.name}.",
            )
        )
        return None

    try:
        summary = model.model_validate(raw)
    except ValidationError as exc:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=f"Schema validation failed: {exc}.",
            )
        )
        return None

    if summary.schema_version != ARTIFACT_SCHEMA_VERSION:
        _report_schema_mismatch(
            artifact_name, path, None, summary.schema_version, result
        )
    return summary


def _check_summary_totals(
    artifact_name: str,
    path: Path,
    summary: ResolutionSummary,
    record_count: int | None,
    result: ValidationResult,
) -> None:
    if record_count is not None and record_count != summary.total:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=(
                    f"Summary total ({summary.total}) does not match "
                    f"{record_count} valid resolution records."
                ),
            )
        )
    if summary.resolved + summary.unresolved != summary.total:
        result.errors.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message=(
                    "Summary totals disagree: "
                    f"resolved ({summary.resolved}) + unresolved "
                    f"({summary.unresolved}) != total ({summary.total})."
                ),
            )
        )
    if sum(summary.by_heuristic.values()) != summary.resolved:
        result.warnings.append(
            ValidationMessage(
                artifact=artifact_name,
                path=path,
                message="Per-heuristic counts do not add up to 'resolved'.",
            )
        )


def _report_schema_mismatch(
    artifact_name: str,
    path: Path,
    line: int | None,
    schema_version: int,
    result: ValidationResult,
) -> None:
    result.errors.append(
        ValidationMessage(
            artifact=artifact_name,
            path=path,
            line=line,
            message=(
                "Schema version mismatch: "
                f"expected {ARTIFACT_SCHEMA_VERSION}, got {schema_version}."
            ),
        )
    )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]
