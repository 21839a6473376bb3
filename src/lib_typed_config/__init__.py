"""Typed, validated application configuration loaded once at startup.

``boot`` is the usual entry point: it layers ``application.*``, an optional
profile, ``*_FILE`` secrets and overrides into one tree, binds every top-level
block to its schema, validates the result, and returns the aggregate.
"""

from __future__ import annotations

from .adapters.reflection.records import RecordReflector
from .application.binder import Binder
from .application.validator import Validator
from .core import bind, boot, load_config, log_effective_config, render_effective
from .domain.constraints import Constraint, Max, Min, NotBlank, NotNull, Pattern, Positive, Violation
from .domain.durations import format_duration, parse_duration
from .domain.errors import (
    BootFailed,
    ConfigError,
    InvalidFormat,
    KeyMissing,
    NotFound,
    PathMissing,
    SourceLoadFailed,
    UnsupportedType,
    ValidationFailed,
    WrongType,
)
from .domain.naming import kebab_key
from .domain.schema import FieldType, Int32, Int64
from .domain.tree import ConfigTree
from .observability import bind_trace_id, get_logger

__all__ = [
    "Binder",
    "BootFailed",
    "ConfigError",
    "ConfigTree",
    "Constraint",
    "FieldType",
    "Int32",
    "Int64",
    "InvalidFormat",
    "KeyMissing",
    "Max",
    "Min",
    "NotBlank",
    "NotFound",
    "NotNull",
    "PathMissing",
    "Pattern",
    "Positive",
    "RecordReflector",
    "SourceLoadFailed",
    "UnsupportedType",
    "ValidationFailed",
    "Validator",
    "Violation",
    "WrongType",
    "bind",
    "bind_trace_id",
    "boot",
    "format_duration",
    "get_logger",
    "kebab_key",
    "load_config",
    "log_effective_config",
    "parse_duration",
    "render_effective",
]
