"""Substitution resolution over the merged tree.

Configuration files may leave ``${path}`` references (as
:class:`~lib_typed_config.domain.templates.Template` values) that their own
content cannot satisfy. They are resolved once every layer has been merged, so
a file can refer to a secret materialised from a ``*_FILE`` variable::

    db { password = ${DB_PASSWORD} }

Only templates are resolved. Plain strings are literal values even when they
contain ``${``, which keeps secret contents and overrides intact.

Lookup order is the merged tree, then the process environment. ``${?path}``
marks an optional reference: when nothing resolves it, a whole-value reference
removes the key and an embedded one becomes the empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..domain.errors import SourceLoadFailed
from ..domain.templates import Reference, Template

_MISSING = object()


def resolve_substitutions(data: Mapping[str, Any], *, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Return a copy of *data* with every template resolved.

    Examples
    --------
    >>> from lib_typed_config.domain.templates import compile_templates
    >>> file_data = compile_templates({"db": {"password": "${DB_PASSWORD}", "url": "jdbc:${?MISSING}h2"}})
    >>> resolve_substitutions({"DB_PASSWORD": "s3cret", **file_data})
    {'DB_PASSWORD': 's3cret', 'db': {'password': 's3cret', 'url': 'jdbc:h2'}}
    >>> resolve_substitutions({"token": "pa${ss}word"})
    {'token': 'pa${ss}word'}
    """

    return _Resolver(data, environ or {}).mapping(data, ())


class _Resolver:
    def __init__(self, source: Mapping[str, Any], environ: Mapping[str, str]) -> None:
        self._source = source
        self._environ = environ
        self._active: list[str] = []

    def mapping(self, mapping: Mapping[str, Any], segments: tuple[str, ...]) -> dict[str, Any]:
        resolved: dict[str, Any] = {}
        for key, value in mapping.items():
            item = self.value(value, (*segments, key))
            if item is not _MISSING:
                resolved[key] = item
        return resolved

    def value(self, value: Any, segments: tuple[str, ...]) -> Any:
        if isinstance(value, Mapping):
            return self.mapping(value, segments)
        if isinstance(value, list):
            items = (self.value(item, segments) for item in value)
            return [item for item in items if item is not _MISSING]
        if isinstance(value, Template):
            return self._interpolate(value, ".".join(segments))
        return value

    def _interpolate(self, template: Template, owner: str) -> Any:
        whole = template.whole
        if whole is not None:
            return self._lookup(whole, owner=owner)

        pieces: list[str] = []
        for part in template.parts:
            if isinstance(part, Reference):
                found = self._lookup(part, owner=owner)
                pieces.append("" if found is _MISSING else _stringify(found))
            else:
                pieces.append(part)
        return "".join(pieces)

    def _lookup(self, reference: Reference, *, owner: str) -> Any:
        if reference.path in self._active:
            chain = " -> ".join([*self._active, reference.path])
            raise SourceLoadFailed(f"Substitution cycle detected at {owner}: {chain}")
        found = _resolve_dotted(self._source, reference.path)
        if found is _MISSING or found is None:
            found = self._environ.get(reference.path, _MISSING)
        if found is _MISSING:
            if reference.optional:
                return _MISSING
            raise SourceLoadFailed(f"Could not resolve substitution {reference} referenced by {owner or '<root>'}")
        self._active.append(reference.path)
        try:
            return self.value(found, tuple(reference.path.split(".")))
        finally:
            self._active.pop()


def _resolve_dotted(source: Mapping[str, Any], dotted: str) -> Any:
    current: Any = source
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
