"""Environment variable override adapter.

Purpose
-------
Translate prefixed process environment variables into a nested override
layer, sitting just below explicit process overrides in precedence.

Key behaviours
--------------
* Only variables starting with ``<PREFIX>_`` are captured.
* ``__`` separates nesting levels; within a segment ``_`` becomes ``-`` and
  the result is lowercased so the keys line up with kebab-case config keys
  (``APP_HTTP__IDLE_TIMEOUT`` → ``http.idle-timeout``).
* Light scalar coercion for booleans, integers, floats, and ``null``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for an application *slug*.

    Examples
    --------
    >>> default_env_prefix('billing-api')
    'BILLING_API'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLoader:
    """Load environment variables that belong to the override namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, object]:
        """Return a nested mapping built from variables carrying *prefix*.

        Examples
        --------
        >>> env = {
        ...     'DEMO_HTTP__PORT': '9090',
        ...     'DEMO_HTTP__IDLE_TIMEOUT': '5s',
        ...     'DEMO_FEATURES__BETA': 'true',
        ...     'OTHER': 'ignored',
        ... }
        >>> DefaultEnvLoader(environ=env).load('DEMO')
        {'http': {'port': 9090, 'idle-timeout': '5s'}, 'features': {'beta': True}}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, object] = {}
        for key, value in self._environ.items():
            if not prefix or not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :]
            if not stripped:
                continue
            assign_nested(collected, [_segment(part) for part in stripped.split("__")], _coerce(value))
        log_debug("env_overrides_loaded", layer="env", path=None, keys=sorted(collected.keys()))
        return collected


def assign_nested(target: dict[str, object], parts: list[str], value: object) -> None:
    """Assign ``value`` inside ``target`` following the key *parts*.

    Raises :class:`ValueError` when a nested key would replace a scalar.

    >>> data: dict[str, object] = {}
    >>> assign_nested(data, ['db', 'pool-size'], 5)
    >>> data
    {'db': {'pool-size': 5}}
    """

    cursor = target
    for part in parts[:-1]:
        child = cursor.setdefault(part, {})
        if not isinstance(child, dict):
            raise ValueError(f"Cannot override scalar with mapping for key {part}")
        cursor = child
    cursor[parts[-1]] = value


def _segment(raw: str) -> str:
    return raw.lower().replace("_", "-")


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('3.5'), _coerce('60s')
    (True, 10, 3.5, '60s')
    """

    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value
