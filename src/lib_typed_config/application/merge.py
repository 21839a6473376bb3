"""Application-layer overlay policy.

Purpose
-------
Overlay a sequence of layer payloads into a single tree while tracking which
layer supplied each dotted key. The module is free of I/O so alternative
composition roots and tests can use it directly.

Contents
    - ``Layer``: the ``(name, data, path)`` triple fed to the merge.
    - ``merge_layers``: public entry point; later layers win.
    - ``expand_dotted``: turn ``{"http.port": 1}`` override tables into nested
      mappings.
    - ``_overlay`` / ``_overlay_branch`` / ``_set_leaf`` / ``_forget``: the
      recursive steps and their provenance bookkeeping.

System Role
-----------
:func:`lib_typed_config.core.load_config` passes layers ordered
``base → profile → secrets → env → overrides`` and wraps the result in a
:class:`lib_typed_config.domain.tree.ConfigTree`.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Iterable, NamedTuple

from ..domain.tree import SourceInfo


class Layer(NamedTuple):
    """One configuration source ready for merging."""

    name: str
    data: Mapping[str, object]
    path: str | None = None


def merge_layers(layers: Iterable[Layer]) -> tuple[dict[str, object], dict[str, SourceInfo]]:
    """Overlay *layers* (lowest precedence first) and collect provenance.

    Keys present in a later layer override the same key in earlier ones;
    subtrees merge key-wise; a scalar replacing a subtree (or the reverse)
    discards the loser entirely.

    Examples
    --------
    >>> merged, meta = merge_layers([
    ...     Layer("base", {"http": {"port": 8080, "host": "localhost"}}, "application.conf"),
    ...     Layer("overrides", {"http": {"port": 9090}}),
    ... ])
    >>> merged["http"], meta["http.port"]["layer"], meta["http.host"]["layer"]
    ({'port': 9090, 'host': 'localhost'}, 'overrides', 'base')
    """

    merged: dict[str, object] = {}
    meta: dict[str, SourceInfo] = {}
    for layer in layers:
        _overlay(merged, meta, deepcopy(dict(layer.data)), layer, ())
    return merged, meta


def expand_dotted(table: Mapping[str, object]) -> dict[str, object]:
    """Expand dotted keys into nested mappings.

    Raises :class:`ValueError` when a key would nest beneath a scalar that an
    earlier key already set.

    >>> expand_dotted({"http.port": "9090", "config.profile": "prod"})
    {'http': {'port': '9090'}, 'config': {'profile': 'prod'}}
    """

    expanded: dict[str, object] = {}
    for dotted, value in table.items():
        parts = [part for part in dotted.split(".") if part]
        if not parts:
            continue
        cursor = expanded
        for part in parts[:-1]:
            child = cursor.setdefault(part, {})
            if not isinstance(child, dict):
                raise ValueError(f"Cannot nest override {dotted!r} beneath scalar {part!r}")
            cursor = child
        cursor[parts[-1]] = value
    return expanded


def _overlay(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    incoming: Mapping[str, object],
    layer: Layer,
    segments: tuple[str, ...],
) -> None:
    for key, value in incoming.items():
        dotted = ".".join((*segments, key))
        if isinstance(value, Mapping):
            _overlay_branch(target, meta, key, value, dotted, layer, segments)
        else:
            _set_leaf(target, meta, key, value, dotted, layer)


def _overlay_branch(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    key: str,
    value: Mapping[str, object],
    dotted: str,
    layer: Layer,
    segments: tuple[str, ...],
) -> None:
    existing = target.get(key)
    if isinstance(existing, dict):
        container = existing
    else:
        _forget(meta, dotted)
        container = {}
        target[key] = container
    _overlay(container, meta, value, layer, (*segments, key))


def _set_leaf(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    key: str,
    value: object,
    dotted: str,
    layer: Layer,
) -> None:
    _forget(meta, dotted)
    target[key] = value
    meta[dotted] = {"layer": layer.name, "path": layer.path, "key": dotted}


def _forget(meta: dict[str, SourceInfo], prefix: str) -> None:
    """Drop provenance for *prefix* and everything beneath it."""

    for dotted in [key for key in meta if key == prefix or key.startswith(prefix + ".")]:
        del meta[dotted]
