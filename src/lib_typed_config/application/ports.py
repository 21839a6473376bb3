"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts adapters satisfy so the binder and the
composition root never depend on concrete implementations.

Contents
--------
* :class:`FileLoader` - parses one configuration file into a mapping.
* :class:`SecretLoader` - materialises ``*_FILE`` secrets.
* :class:`EnvLoader` - turns prefixed environment variables into overrides.
* :class:`SchemaReflector` - exposes a record schema's fields and builds
  instances from positional values.

System Role
-----------
The binder depends only on :class:`SchemaReflector`; reflection over
dataclasses is one backing, handwritten descriptors or generated code would be
others.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from ..domain.schema import FieldSpec


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path*; raise ``NotFound`` when absent and ``InvalidFormat`` when malformed."""


@runtime_checkable
class SecretLoader(Protocol):
    """Resolve secrets referenced by ``<NAME>_FILE`` environment variables."""

    def load(self) -> Mapping[str, str]:
        """Return ``{NAME: trimmed file contents}``; unreadable files map to ``""``."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate prefixed environment variables into a nested override mapping."""

    def load(self, prefix: str) -> Mapping[str, object]:
        """Return variables that start with *prefix* (``__`` separates nesting levels)."""


@runtime_checkable
class SchemaReflector(Protocol):
    """Expose a record schema's structure as data.

    Both operations are pure.
    """

    def is_schema(self, candidate: Any) -> bool:
        """Return ``True`` when *candidate* is a record schema this reflector understands."""

    def fields_of(self, schema: Any) -> Sequence[FieldSpec]:
        """Return the ordered fields of *schema*; raise ``UnsupportedType`` for non-schemas."""

    def construct(self, schema: Any, values: Sequence[Any]) -> Any:
        """Build an instance of *schema* from *values* given in field order."""
