from __future__ import annotations

from pathlib import Path

import pytest

from discovery.loader import DiscoveryLoadError, load_call_batch, load_discovery
from discovery.models import DiscoveredEntry, DiscoveryOutput

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "liquity"


def test_load_discovery_fixture() -> None:
    discovered = load_discovery(FIXTURE_DIR / "discovered.json")

    assert len(discovered.entries) == 8
    assert [entry.name for entry in discovered.contracts()][:2] == [
        "BorrowerOperations",
        "TroveManager",
    ]
    assert all(entry.is_contract for entry in discovered.contracts())
    assert "Deployer" not in {entry.name for entry in discovered.contracts()}


def test_load_call_batch_accepts_camel_case_calls() -> None:
    batch = load_call_batch(FIXTURE_DIR / "calls.json")

    assert batch.call_count() == 5
    first = batch.callers[0].calls[0]
    assert first.storage_variable == "troveManagerCached"
    assert first.interface_type == "ITroveManager"
    assert first.called_function == "liquidate"
    assert batch.callers[1].ir == ""


def test_find_entry_is_case_insensitive() -> None:
    discovered = load_discovery(FIXTURE_DIR / "discovered.json")

    entry = discovered.find_entry("eth:0xAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA")

    assert entry is not None
    assert entry.name == "TroveManager"
    assert discovered.find_entry("eth:0x0") is None


def test_find_entry_contracts_only_skips_other_types() -> None:
    discovered = load_discovery(FIXTURE_DIR / "discovered.json")
    deployer = "eth:0x9999999999999999999999999999999999999999"

    assert discovered.find_entry(deployer) is not None
    assert discovered.find_entry(deployer, contracts_only=True) is None


def test_abi_for_missing_address_is_empty() -> None:
    discovered = DiscoveryOutput(
        entries=(DiscoveredEntry(address="eth:0x01"),),
        abis={"ETH:0X02": ("function f()",)},
    )

    assert discovered.abi_for("eth:0x01") == ()
    assert discovered.abi_for("eth:0x02") == ("function f()",)


def test_load_discovery_drops_malformed_abis(tmp_path: Path) -> None:
    path = tmp_path / "discovered.json"
    path.write_text(
        '{"entries": [{"address": "eth:0x01", "name": "A"}],'
        ' "abis": {"eth:0x01": ["function f()", 7], "eth:0x02": "oops"}}',
        encoding="utf-8",
    )

    discovered = load_discovery(path)

    assert discovered.abis == {"eth:0x01": ("function f()",)}
    assert discovered.entries[0].type is None
    assert discovered.contracts() == []


@pytest.mark.parametrize(
    "content",
    ["not json", "[1, 2, 3]", '{"entries": [{"name": "no address"}]}'],
)
def test_load_discovery_rejects_invalid_input(tmp_path: Path, content: str) -> None:
    path = tmp_path / "discovered.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(DiscoveryLoadError):
        load_discovery(path)


def test_load_discovery_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryLoadError, match="Failed to read"):
        load_discovery(tmp_path / "missing.json")


def test_load_call_batch_rejects_incomplete_call(tmp_path: Path) -> None:
    path = tmp_path / "calls.json"
    path.write_text(
        '{"callers": [{"address": "eth:0x01", "calls": [{"storageVariable": "x"}]}]}',
        encoding="utf-8",
    )

    with pytest.raises(DiscoveryLoadError, match="Invalid call batch"):
        load_call_batch(path)


def test_load_call_batch_rejects_duplicate_callers(tmp_path: Path) -> None:
    path = tmp_path / "calls.json"
    path.write_text(
        '{"callers": [{"address": "eth:0x01", "ir": "a(I) := b(I)"},'
        ' {"address": "eth:0x01", "ir": "a(I) := c(I)"}]}',
        encoding="utf-8",
    )

    with pytest.raises(DiscoveryLoadError, match="listed more than once"):
        load_call_batch(path)
