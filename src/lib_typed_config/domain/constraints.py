"""Declarative field constraints.

Purpose
-------
Hold the exhaustive constraint catalogue. Each constraint is a frozen,
hashable dataclass so it can sit inside ``typing.Annotated`` metadata::

    port: Annotated[Int32, Min(1), Max(65535)]

Constraints know nothing about paths or schemas; :mod:`lib_typed_config.application.validator`
walks the record and asks each constraint for a failure message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class Violation:
    """A single ``(path, message)`` pair emitted by the validator."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path} {self.message}"


class Constraint:
    """Base class for catalogue constraints.

    ``applies_to`` names the semantic kinds (``FieldType`` values) the
    constraint accepts; ``None`` means any kind.
    """

    applies_to: ClassVar[frozenset[str] | None] = None
    null_sensitive: ClassVar[bool] = False

    def check(self, value: Any) -> str | None:
        """Return a failure message for *value*, or ``None`` when it passes."""

        raise NotImplementedError


_STRING = frozenset({"string"})
_NUMERIC = frozenset({"int32", "int64", "double"})


@dataclass(frozen=True, slots=True)
class NotBlank(Constraint):
    """Reject empty strings and strings made only of whitespace.

    >>> NotBlank().check(" "), NotBlank().check("db")
    ('must not be blank', None)
    """

    applies_to: ClassVar[frozenset[str] | None] = _STRING

    def check(self, value: Any) -> str | None:
        if not str(value).strip():
            return "must not be blank"
        return None


@dataclass(frozen=True, slots=True)
class NotNull(Constraint):
    """Reject ``None``."""

    null_sensitive: ClassVar[bool] = True

    def check(self, value: Any) -> str | None:
        if value is None:
            return "must not be null"
        return None


@dataclass(frozen=True, slots=True)
class Pattern(Constraint):
    """Require the whole string to match ``regex``.

    >>> Pattern("^jdbc:.*").check("http://invalid")
    'must match "^jdbc:.*"'
    """

    regex: str
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False, hash=False)

    applies_to: ClassVar[frozenset[str] | None] = _STRING

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.regex))

    def check(self, value: Any) -> str | None:
        if self._compiled.fullmatch(str(value)) is None:
            return f'must match "{self.regex}"'
        return None


@dataclass(frozen=True, slots=True)
class Min(Constraint):
    """Require ``value >= n``."""

    n: int

    applies_to: ClassVar[frozenset[str] | None] = _NUMERIC

    def check(self, value: Any) -> str | None:
        if value < self.n:
            return f"must be greater than or equal to {self.n}"
        return None


@dataclass(frozen=True, slots=True)
class Max(Constraint):
    """Require ``value <= n``."""

    n: int

    applies_to: ClassVar[frozenset[str] | None] = _NUMERIC

    def check(self, value: Any) -> str | None:
        if value > self.n:
            return f"must be less than or equal to {self.n}"
        return None


@dataclass(frozen=True, slots=True)
class Positive(Constraint):
    """Require ``value > 0``."""

    applies_to: ClassVar[frozenset[str] | None] = _NUMERIC

    def check(self, value: Any) -> str | None:
        if value <= 0:
            return "must be positive"
        return None
