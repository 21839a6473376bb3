"""Deferred ``${path}`` references.

A :class:`Template` is a file value whose references are settled after every
layer has been merged, so ``application.*`` can point at a secret registered
later (``password = ${DB_PASSWORD}``). Only configuration files produce
templates. Secret contents, environment overrides, and process overrides stay
plain strings and are never read as references, whatever characters they hold.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_REFERENCE = re.compile(r"\$\{(\?)?\s*([^}\s]+)\s*\}")


@dataclass(frozen=True)
class Reference:
    """One ``${path}`` (or optional ``${?path}``) occurrence."""

    path: str
    optional: bool = False

    def __str__(self) -> str:
        return f"${{{'?' if self.optional else ''}{self.path}}}"


@dataclass(frozen=True)
class Template:
    """A string value made of literal text and :class:`Reference` parts."""

    parts: tuple[str | Reference, ...]

    @property
    def whole(self) -> Reference | None:
        """The reference when the template is nothing but one reference."""

        if len(self.parts) == 1 and isinstance(self.parts[0], Reference):
            return self.parts[0]
        return None

    def __str__(self) -> str:
        return "".join(str(part) for part in self.parts)


def parse_template(text: str) -> str | Template:
    """Split *text* into literal and reference parts.

    Text without references comes back unchanged.

    Examples
    --------
    >>> parse_template("jdbc:${host}:${?port}").parts
    ('jdbc:', Reference(path='host', optional=False), ':', Reference(path='port', optional=True))
    >>> parse_template(" ${DB_PASSWORD} ").whole
    Reference(path='DB_PASSWORD', optional=False)
    >>> parse_template("plain")
    'plain'
    """

    whole = _REFERENCE.fullmatch(text.strip())
    if whole is not None:
        return Template((Reference(whole.group(2), optional=bool(whole.group(1))),))
    parts: list[str | Reference] = []
    cursor = 0
    for match in _REFERENCE.finditer(text):
        if match.start() > cursor:
            parts.append(text[cursor : match.start()])
        parts.append(Reference(match.group(2), optional=bool(match.group(1))))
        cursor = match.end()
    if not parts:
        return text
    if cursor < len(text):
        parts.append(text[cursor:])
    return Template(tuple(parts))


def compile_templates(value: Any) -> Any:
    """Turn every string holding ``${...}`` inside *value* into a :class:`Template`.

    >>> compile_templates({"db": {"password": "${DB_PASSWORD}", "pool": 4}})["db"]["pool"]
    4
    """

    if isinstance(value, Mapping):
        return {key: compile_templates(item) for key, item in value.items()}
    if isinstance(value, list):
        return [compile_templates(item) for item in value]
    if isinstance(value, str) and "${" in value:
        return parse_template(value)
    return value
