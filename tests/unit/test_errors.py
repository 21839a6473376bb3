from __future__ import annotations

from lib_typed_config.domain.constraints import Violation
from lib_typed_config.domain.errors import (
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


def test_error_hierarchy() -> None:
    for exception in (
        InvalidFormat(""),
        NotFound(""),
        SourceLoadFailed(""),
        PathMissing("http"),
        KeyMissing("http", "port"),
        WrongType("http", "port", "int32"),
        UnsupportedType("List"),
        ValidationFailed([]),
        BootFailed("AppConfig", ValueError("boom")),
    ):
        assert isinstance(exception, ConfigError)


def test_messages() -> None:
    assert str(PathMissing("http")) == "Configuration path not found: http"
    assert str(KeyMissing("http", "idle-timeout")) == "Missing required config key: idle-timeout in path http"
    assert str(KeyMissing("", "port")) == "Missing required config key: port in path <root>"
    assert str(UnsupportedType("List")) == "Unsupported config type: List"
    assert str(WrongType("", "port", "int32")) == "port cannot be read as int32"


def test_validation_failed_sorts_violations() -> None:
    first = ValidationFailed([Violation("url", 'must match "^jdbc:.*"'), Violation("pool_size", "must be positive")])
    second = ValidationFailed([Violation("pool_size", "must be positive"), Violation("url", 'must match "^jdbc:.*"')])
    assert str(first) == str(second)
    assert str(first) == 'Config validation failed: pool_size must be positive; url must match "^jdbc:.*"'
    assert [violation.path for violation in first.violations] == ["pool_size", "url"]


def test_boot_failed_keeps_cause() -> None:
    cause = PathMissing("http")
    error = BootFailed("AppConfig", cause)
    assert error.cause is cause
    assert str(error) == "Could not initialize configuration for AppConfig: Configuration path not found: http"
