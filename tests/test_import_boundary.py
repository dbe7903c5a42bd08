from __future__ import annotations

import sys


def test_engine_import_does_not_load_outer_layers() -> None:
    before_modules = set(sys.modules)
    import heuristics.engine  # noqa: F401

    newly_imported = set(sys.modules) - before_modules
    assert not any(
        name in {"cli", "rules", "resolve", "verify"}
        or name.startswith(("rules.", "resolve.", "verify."))
        for name in newly_imported
    )
