from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from heuristics.registry import DEFAULT_HEURISTIC_ORDER, KNOWN_HEURISTICS
from heuristics.variable_chain import DEFAULT_ADDRESS_PREFIX

CONFIG_FILENAME = "calltarget.toml"


class TraceConfig(BaseModel):
    """Operator-facing decision trace settings."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(
        default=False,
        description="Emit one trace line per heuristic and one per winner",
    )
    throttle_every: int = Field(
        default=1,
        ge=1,
        description="Yield to the event loop after this many trace lines",
    )


class ResolverConfig(BaseModel):
    """Configuration for call-target resolution."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".calltarget",
        description="Output directory for resolution artifacts",
    )
    heuristics: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HEURISTIC_ORDER),
        description="Heuristics to run, in registration (tie-break) order",
    )
    address_prefix: str = Field(
        default=DEFAULT_ADDRESS_PREFIX,
        min_length=1,
        description="Prefix marking a recorded state value as an address",
    )
    trace: TraceConfig = Field(
        default_factory=TraceConfig,
        description="Decision trace settings",
    )

    @field_validator("heuristics", mode="before")
    @classmethod
    def validate_heuristics(cls, v: Any) -> Any:
        """Validate heuristic names against the built-in registry.

        Note: this runs in `mode="before"` so we can report a clear error
        message using the raw TOML values.
        """

        if v is None:
            return list(DEFAULT_HEURISTIC_ORDER)

        if not isinstance(v, list) or not all(isinstance(name, str) for name in v):
            msg = "heuristics must be a list of heuristic names"
            raise ValueError(msg)

        if not v:
            msg = "heuristics must name at least one heuristic"
            raise ValueError(msg)

        seen: set[str] = set()
        for name in v:
            if name not in KNOWN_HEURISTICS:
                msg = (
                    f"Invalid heuristic '{name}'. "
                    f"Valid heuristics: {', '.join(sorted(KNOWN_HEURISTICS))}"
                )
                raise ValueError(msg)
            if name in seen:
                msg = f"Heuristic '{name}' is listed more than once"
                raise ValueError(msg)
            seen.add(name)

        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the project root.

    The config output_dir must be a non-empty relative path that remains
    within the root after resolution. Absolute paths and paths that escape
    the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the project root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the project root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> ResolverConfig:
    """Load configuration from calltarget.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return ResolverConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ResolverConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
