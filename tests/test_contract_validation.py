from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    RESOLUTION_ARTIFACT_SPECS,
    RESOLUTION_SUMMARY_JSON,
    RESOLUTIONS_JSONL,
)
from contract.validation import (
    ValidationMessage,
    ValidationResult,
    validate_artifacts,
)
from discovery.loader import load_call_batch, load_discovery
from heuristics.engine import create_heuristic_engine
from resolve.batch import resolve_batch
from resolve.write import write_resolutions

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "liquity"


def _write_valid_artifacts(d: Path) -> None:
    """Resolve the fixture batch and write its artifacts to directory d."""
    result = resolve_batch(
        create_heuristic_engine(),
        load_discovery(FIXTURE_DIR / "discovered.json"),
        load_call_batch(FIXTURE_DIR / "calls.json"),
    )
    write_resolutions(d, result)


def _read_records(d: Path) -> list[dict]:
    lines = (d / RESOLUTIONS_JSONL).read_bytes().splitlines()
    return [orjson.loads(line) for line in lines if line.strip()]


def _write_records(d: Path, records: list[dict]) -> None:
    (d / RESOLUTIONS_JSONL).write_bytes(
        b"".join(orjson.dumps(record) + b"\n" for record in records)
    )


def _update_summary(d: Path, **changes: object) -> None:
    path = d / RESOLUTION_SUMMARY_JSON
    summary = orjson.loads(path.read_bytes())
    summary.update(changes)
    path.write_bytes(orjson.dumps(summary))


def _messages_contain(messages: list[ValidationMessage], needle: str) -> bool:
    """Return True when any validation message contains the given substring."""
    return any(needle in message.message for message in messages)


# Group 1: Data class tests


def test_validation_message_location_with_line() -> None:
    """ValidationMessage.location returns path:line when line is present."""
    msg = ValidationMessage("resolutions", Path("x.jsonl"), "bad", line=7)
    assert msg.location() == "x.jsonl:7"


def test_validation_message_location_without_line() -> None:
    """ValidationMessage.location returns only path when line is missing."""
    msg = ValidationMessage("summary", Path("x.json"), "bad")
    assert msg.location() == "x.json"


def test_validation_message_to_dict() -> None:
    msg = ValidationMessage("resolutions", Path("x.jsonl"), "bad", line=3)
    assert msg.to_dict() == {
        "artifact": "resolutions",
        "path": "x.jsonl",
        "line": 3,
        "message": "bad",
    }


def test_validation_result_ok_tracks_errors() -> None:
    assert ValidationResult().ok is True
    assert ValidationResult(errors=[ValidationMessage("x", Path("a"), "boom")]).ok is False


def test_artifact_specs_cover_both_resolution_files() -> None:
    assert {
        name: (spec.filename, spec.format)
        for name, spec in RESOLUTION_ARTIFACT_SPECS.items()
    } == {
        "resolutions": (RESOLUTIONS_JSONL, "jsonl"),
        "summary": (RESOLUTION_SUMMARY_JSON, "json"),
    }


# Group 2: Directory handling


def test_missing_directory(tmp_path: Path) -> None:
    """validate_artifacts reports a missing artifacts directory."""
    result = validate_artifacts(tmp_path / "nonexistent")
    assert result.ok is False
    assert _messages_contain(result.errors, "Artifacts directory does not exist")


def test_not_a_directory(tmp_path: Path) -> None:
    file_path = tmp_path / "not-a-dir"
    file_path.write_text("x", encoding="utf-8")

    result = validate_artifacts(file_path)

    assert result.ok is False
    assert _messages_contain(result.errors, "Artifacts path is not a directory")


def test_missing_artifact_files(tmp_path: Path) -> None:
    """validate_artifacts reports each required artifact when directory is empty."""
    artifacts_dir = tmp_path / "artifacts"
    artifacts_dir.mkdir()

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert len(result.errors) == len(RESOLUTION_ARTIFACT_SPECS)
    assert all("Required artifact file is missing" in m.message for m in result.errors)


# Group 3: Happy path


def test_written_artifacts_validate(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)

    result = validate_artifacts(artifacts_dir)

    assert result.ok is True
    assert result.errors == []
    assert result.warnings == []


def test_written_records_are_sorted_json_lines(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)

    records = _read_records(artifacts_dir)

    assert len(records) == 5
    assert list(records[0]) == sorted(records[0])
    assert records[0]["schema_version"] == ARTIFACT_SCHEMA_VERSION
    assert records[0]["call"] == {
        "called_function": "liquidate",
        "interface_type": "ITroveManager",
        "storage_variable": "troveManagerCached",
    }
    assert records[3]["resolved"] is False
    assert records[3]["decision"] is None


# Group 4: Broken artifacts


def test_invalid_json_line_reports_line_number(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    path = artifacts_dir / RESOLUTIONS_JSONL
    path.write_bytes(path.read_bytes() + b"{not json\n")

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    invalid = [m for m in result.errors if "Invalid JSON" in m.message]
    assert len(invalid) == 1
    assert invalid[0].line == 6


def test_record_schema_violation(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    records = _read_records(artifacts_dir)
    records[1]["decision"]["confidence"] = 150
    _write_records(artifacts_dir, records)

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert _messages_contain(result.errors, "Schema validation failed")
    # The broken record no longer counts towards the summary total.
    assert _messages_contain(result.errors, "does not match 4 valid resolution records")


def test_schema_version_mismatch_reported_once(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    records = _read_records(artifacts_dir)
    for record in records:
        record["schema_version"] = ARTIFACT_SCHEMA_VERSION + 1
    _write_records(artifacts_dir, records)

    result = validate_artifacts(artifacts_dir)

    mismatches = [m for m in result.errors if "Schema version mismatch" in m.message]
    assert len(mismatches) == 1
    assert mismatches[0].line == 1


def test_resolved_flag_must_match_decision(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    records = _read_records(artifacts_dir)
    records[3]["resolved"] = True
    _write_records(artifacts_dir, records)

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    flagged = [m for m in result.errors if "'resolved' disagrees" in m.message]
    assert [m.line for m in flagged] == [4]


@pytest.mark.parametrize(
    ("changes", "needle"),
    [
        ({"total": 6, "unresolved": 2}, "does not match 5 valid resolution records"),
        ({"unresolved": 3}, "Summary totals disagree"),
        ({"schema_version": 99}, "Schema version mismatch"),
        ({"total": "five"}, "Schema validation failed"),
    ],
)
def test_summary_errors(tmp_path: Path, changes: dict[str, object], needle: str) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    _update_summary(artifacts_dir, **changes)

    result = validate_artifacts(artifacts_dir)

    assert result.ok is False
    assert _messages_contain(result.errors, needle)


def test_summary_must_be_object(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    (artifacts_dir / RESOLUTION_SUMMARY_JSON).write_bytes(b"[1, 2]")

    result = validate_artifacts(artifacts_dir)

    assert _messages_contain(result.errors, "Expected JSON object")


def test_per_heuristic_drift_is_a_warning(tmp_path: Path) -> None:
    artifacts_dir = tmp_path / "artifacts"
    _write_valid_artifacts(artifacts_dir)
    _update_summary(artifacts_dir, by_heuristic={"variable-chain": 1})

    result = validate_artifacts(artifacts_dir)

    assert result.ok is True
    assert _messages_contain(result.warnings, "Per-heuristic counts")
