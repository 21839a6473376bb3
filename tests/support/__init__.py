"""Shared fixtures and schemas for the test suite."""

from __future__ import annotations

from .sandbox import ConfigSandbox, create_config_sandbox
from .schemas import (
    AppConfig,
    CamelBlocks,
    DbConfig,
    EdgeConfig,
    FlatConfig,
    HttpConfig,
    MisconstrainedConfig,
    TaggedConfig,
    TlsConfig,
)

__all__ = [
    "AppConfig",
    "CamelBlocks",
    "ConfigSandbox",
    "DbConfig",
    "EdgeConfig",
    "FlatConfig",
    "HttpConfig",
    "MisconstrainedConfig",
    "TaggedConfig",
    "TlsConfig",
    "create_config_sandbox",
]
