"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by adapters, the binder, and the boot
orchestrator. The hierarchy lives in the domain layer so every outer layer can
raise and catch it without importing adapters.

Contents
--------
* :class:`ConfigError` - umbrella base class for every library failure.
* :class:`InvalidFormat` / :class:`NotFound` - adapter-level file problems.
* :class:`SourceLoadFailed` - a required source could not be materialised.
* :class:`PathMissing` / :class:`KeyMissing` - absent blocks and leaves.
* :class:`WrongType` / :class:`UnsupportedType` - coercion and schema problems.
* :class:`ValidationFailed` - aggregated constraint violations.
* :class:`BootFailed` - top-level wrapper raised by :func:`lib_typed_config.boot`.

System Role
-----------
Each class carries the data named in its message as attributes so callers and
tests can inspect failures without parsing strings.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .constraints import Violation


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_typed_config``.

    Callers that only need to know "configuration is broken" catch this single
    type.
    """


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be parsed into structured data.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`pyhocon`, :mod:`tomllib`, :mod:`json`,
    :mod:`yaml`).
    """


class NotFound(ConfigError):
    """Raised by file loaders when a candidate file does not exist.

    The layering step decides whether absence is fatal (base and profile files)
    or simply means "try the next suffix".
    """


class SourceLoadFailed(ConfigError):
    """A required configuration source is missing, unparsable, or unresolvable."""


class PathMissing(ConfigError):
    """The tree holds no block at the requested top-level path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Configuration path not found: {path}")


class KeyMissing(ConfigError):
    """A field's derived key is absent from its block.

    Examples
    --------
    >>> str(KeyMissing("http", "idle-timeout", origin="application.conf"))
    'Missing required config key: idle-timeout in path http (application.conf)'
    """

    def __init__(self, path: str, key: str, *, origin: str | None = None) -> None:
        self.path = path
        self.key = key
        self.origin = origin
        message = f"Missing required config key: {key} in path {path or '<root>'}"
        if origin:
            message += f" ({origin})"
        super().__init__(message)


class WrongType(ConfigError):
    """A leaf exists but cannot be read as the declared semantic type."""

    def __init__(
        self,
        path: str,
        key: str,
        expected: str,
        *,
        actual: str | None = None,
        detail: str | None = None,
        origin: str | None = None,
    ) -> None:
        self.path = path
        self.key = key
        self.expected = expected
        self.actual = actual
        self.origin = origin
        message = f"{self.dotted} cannot be read as {expected}"
        if actual:
            message += f": has type {actual}"
        if detail:
            message += f": {detail}"
        if origin:
            message += f" ({origin})"
        super().__init__(message)

    @property
    def dotted(self) -> str:
        """Full dotted path of the offending leaf."""

        return f"{self.path}.{self.key}" if self.path else self.key


class UnsupportedType(ConfigError):
    """The schema declares a type (or type/constraint pairing) the binder cannot handle."""

    def __init__(self, type_name: str, *, detail: str | None = None) -> None:
        self.type_name = type_name
        message = f"Unsupported config type: {type_name}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ValidationFailed(ConfigError):
    """One or more declarative constraints rejected the bound value.

    Violations are stored sorted by their rendered ``"<path> <message>"`` text
    so the error message is byte-identical across runs.

    Examples
    --------
    >>> error = ValidationFailed([Violation("port", "must be positive"), Violation("host", "must not be blank")])
    >>> str(error)
    'Config validation failed: host must not be blank; port must be positive'
    """

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations: tuple[Violation, ...] = tuple(sorted(violations, key=str))
        super().__init__(_render_violations(self.violations))


class BootFailed(ConfigError):
    """Top-level failure raised by the boot orchestrator.

    ``__cause__`` holds the underlying error; :attr:`cause` mirrors it for
    callers that prefer an explicit attribute.
    """

    def __init__(self, schema_name: str, cause: BaseException) -> None:
        self.schema_name = schema_name
        self.cause = cause
        super().__init__(f"Could not initialize configuration for {schema_name}: {cause}")


def _render_violations(violations: Sequence[Violation]) -> str:
    return "Config validation failed: " + "; ".join(str(violation) for violation in violations)
