"""Resolver configuration rules."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    ResolverConfig,
    TraceConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ResolverConfig",
    "TraceConfig",
    "load_config",
    "resolve_output_dir",
]
