"""Resolved configuration tree.

Purpose
-------
Anchor the immutable :class:`ConfigTree` value object that carries the merged
configuration and its provenance from the layering step to the binder. This
module belongs to the domain layer and performs no I/O.

Contents
--------
* :class:`SourceInfo` - where a dotted key came from (layer, file, key).
* :class:`ConfigTree` - read-only ``Mapping`` with dotted lookups, typed leaf
  accessors, subtree views, and provenance queries.
* :data:`EMPTY_TREE` - canonical empty instance.

System Role
-----------
The binder only talks to this type: it asks whether a path exists, reads a
subtree, and reads leaves through the typed accessors. Accessors raise
:class:`KeyMissing` and :class:`WrongType` with the subtree's root path so
error messages always name the full dotted location.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Iterator, TypedDict

from .durations import format_duration, nanos_to_timedelta, parse_duration_nanos
from .errors import KeyMissing, PathMissing, WrongType

INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)

_TRUE_WORDS = frozenset({"true", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "no", "off"})


class SourceInfo(TypedDict):
    """Describe the origin of a resolved configuration key.

    Attributes
    ----------
    layer:
        Logical layer name (``"base"``, ``"profile"``, ``"secrets"``,
        ``"env"``, or ``"overrides"``).
    path:
        File that produced the key; ``None`` for in-memory layers.
    key:
        Fully qualified dotted key.
    """

    layer: str
    path: str | None
    key: str


_MISSING = object()


@dataclass(frozen=True, slots=True)
class ConfigTree(Mapping[str, Any]):
    """Immutable configuration tree handed from layering to binding.

    Parameters
    ----------
    _data:
        Merged mapping; frozen recursively on construction.
    _meta:
        Provenance keyed by the full dotted key (relative to the real root,
        not to this view).
    root:
        Dotted path of this view inside the full tree; ``""`` for the root.

    Examples
    --------
    >>> tree = ConfigTree(
    ...     {"http": {"port": 8080, "idle-timeout": "60s"}},
    ...     {"http.port": {"layer": "base", "path": "application.conf", "key": "http.port"}},
    ... )
    >>> http = tree.get_config("http")
    >>> http.root, http.get_int("port"), http.get_duration("idle-timeout")
    ('http', 8080, datetime.timedelta(seconds=60))
    >>> http.origin("port")["path"]
    'application.conf'
    """

    _data: Mapping[str, Any]
    _meta: Mapping[str, SourceInfo] = field(default_factory=dict)
    root: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "_data", _freeze(self._data))
        object.__setattr__(self, "_meta", MappingProxyType(dict(self._meta)))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve *key* as a dotted path and return ``default`` when missing.

        >>> ConfigTree({"db": {"pool-size": 10}}).get("db.pool-size")
        10
        """

        found = _resolve_dotted(self._data, key)
        return default if found is _MISSING else found

    def has_path(self, path: str) -> bool:
        """Return ``True`` when *path* resolves to a non-null value.

        >>> tree = ConfigTree({"http": {"host": "localhost", "proxy": None}})
        >>> tree.has_path("http.host"), tree.has_path("http.proxy"), tree.has_path("db")
        (True, False, False)
        """

        found = _resolve_dotted(self._data, path)
        return found is not _MISSING and found is not None

    def get_config(self, path: str) -> ConfigTree:
        """Return the subtree at *path* as a view that remembers its location."""

        found = _resolve_dotted(self._data, path)
        if found is _MISSING or found is None:
            raise PathMissing(self._full(path))
        if not isinstance(found, Mapping):
            raise WrongType(self.root, path, "object", actual=_kind_of(found), origin=self._leaf_origin(path))
        return ConfigTree(found, self._meta, self._full(path))

    def get_string(self, path: str) -> str:
        value = self._leaf(path)
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        if isinstance(value, timedelta):
            return format_duration(value)
        raise self._wrong_type(path, "string", value)

    def get_int(self, path: str) -> int:
        """Read a 32-bit signed integer."""

        return self._integer(path, "int32", INT32_RANGE)

    def get_long(self, path: str) -> int:
        """Read a 64-bit signed integer."""

        return self._integer(path, "int64", INT64_RANGE)

    def get_double(self, path: str) -> float:
        value = self._leaf(path)
        if isinstance(value, bool):
            raise self._wrong_type(path, "double", value)
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                raise self._wrong_type(path, "double", value) from None
        raise self._wrong_type(path, "double", value)

    def get_bool(self, path: str) -> bool:
        value = self._leaf(path)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_WORDS:
                return True
            if lowered in _FALSE_WORDS:
                return False
        raise self._wrong_type(path, "boolean", value)

    def get_duration(self, path: str) -> timedelta:
        """Read a duration; bare numbers are milliseconds."""

        value = self._leaf(path)
        if isinstance(value, timedelta):
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise self._wrong_type(path, "duration", value)
        text = value if isinstance(value, str) else format(Decimal(repr(value)), "f")
        try:
            return nanos_to_timedelta(parse_duration_nanos(text))
        except ValueError as exc:
            raise self._wrong_type(path, "duration", value, detail=str(exc)) from None

    def origin(self, path: str) -> SourceInfo | None:
        """Return provenance for the leaf at *path* (relative to this view)."""

        return self._meta.get(self._full(path))

    def origin_description(self, path: str = "") -> str:
        """Describe which sources produced the subtree at *path*.

        >>> tree = ConfigTree(
        ...     {"db": {"url": "jdbc:h2:mem:", "user": "sa"}},
        ...     {
        ...         "db.url": {"layer": "base", "path": "application.conf", "key": "db.url"},
        ...         "db.user": {"layer": "overrides", "path": None, "key": "db.user"},
        ...     },
        ... )
        >>> tree.origin_description("db")
        'merge of application.conf, overrides'
        """

        prefix = self._full(path)
        sources = sorted(
            {
                info["path"] or info["layer"]
                for dotted, info in self._meta.items()
                if not prefix or dotted == prefix or dotted.startswith(prefix + ".")
            }
        )
        if not sources:
            return "unknown origin"
        if len(sources) == 1:
            return sources[0]
        return "merge of " + ", ".join(sources)

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy of this view's data."""

        return _thaw(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the tree to JSON; durations render as duration strings.

        >>> ConfigTree({"http": {"port": 8080}}).to_json()
        '{"http":{"port":8080}}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False, default=_json_default)

    def _integer(self, path: str, expected: str, bounds: tuple[int, int]) -> int:
        value = self._leaf(path)
        if isinstance(value, bool):
            raise self._wrong_type(path, expected, value)
        number: int | None = None
        if isinstance(value, int):
            number = value
        elif isinstance(value, float) and value.is_integer():
            number = int(value)
        elif isinstance(value, str):
            try:
                number = int(value.strip())
            except ValueError:
                number = None
        if number is None:
            raise self._wrong_type(path, expected, value)
        low, high = bounds
        if not low <= number <= high:
            raise self._wrong_type(path, expected, value, detail=f"{number} is out of range")
        return number

    def _leaf(self, path: str) -> Any:
        found = _resolve_dotted(self._data, path)
        if found is _MISSING or found is None:
            raise KeyMissing(self.root, path, origin=self.origin_description())
        return found

    def _wrong_type(self, path: str, expected: str, value: Any, *, detail: str | None = None) -> WrongType:
        return WrongType(
            self.root,
            path,
            expected,
            actual=_kind_of(value),
            detail=detail,
            origin=self._leaf_origin(path),
        )

    def _leaf_origin(self, path: str) -> str | None:
        info = self.origin(path)
        if info is None:
            return None
        return info["path"] or info["layer"]

    def _full(self, path: str) -> str:
        if not path:
            return self.root
        return f"{self.root}.{path}" if self.root else path


def _resolve_dotted(source: Mapping[str, Any], dotted: str) -> Any:
    if not dotted:
        return source
    current: Any = source
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _kind_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, timedelta):
        return "duration"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "list"
    return type(value).__name__


def _freeze(value: Any) -> Any:
    """Recursively wrap mappings in ``MappingProxyType`` and lists in tuples."""

    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, timedelta):
        return format_duration(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


#: Shared empty tree; safe to reuse because :class:`ConfigTree` is immutable.
EMPTY_TREE = ConfigTree({}, {})
