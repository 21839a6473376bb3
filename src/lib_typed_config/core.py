"""Composition root for ``lib_typed_config``.

Purpose
-------
Provide the entry points that wire adapters, the overlay policy, the binder,
and the validator together:

* :func:`load_config` - Source Layering. Builds the effective
  :class:`ConfigTree` from ``application.*``, an optional profile overlay,
  ``*_FILE`` secrets, prefixed environment overrides, and explicit process
  overrides.
* :func:`log_effective_config` - the redacted INFO dump.
* :func:`bind` - bind one block with the default reflector and validator.
* :func:`boot` - the single startup call returning the validated aggregate.

Precedence (highest first)
--------------------------
process overrides > environment overrides > secrets > profile file > base file.

System Role
-----------
This is the only module that knows about concrete adapters; adjust wiring or
precedence here.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Sequence, TypeVar

from .adapters.env.default import DefaultEnvLoader
from .adapters.file_loaders.structured import FILE_LOADERS, render_hocon
from .adapters.reflection.records import RecordReflector
from .adapters.secrets.files import FileSecretLoader
from .application.binder import Binder
from .application.dump import redact_top_level
from .application.merge import Layer, expand_dotted, merge_layers
from .application.substitution import resolve_substitutions
from .domain.errors import BootFailed, InvalidFormat, NotFound, SourceLoadFailed, UnsupportedType
from .domain.naming import kebab_key
from .domain.schema import FieldSpec, FieldType
from .domain.tree import ConfigTree
from .observability import get_logger, log_debug, log_error, log_info, make_event, new_trace_id

BASENAME: Final[str] = "application"
PROFILE_OVERRIDE: Final[str] = "config.profile"
PROFILE_ENV: Final[str] = "CONFIG_PROFILE"
DIR_OVERRIDE: Final[str] = "config.dir"
DIR_ENV: Final[str] = "CONFIG_DIR"

T = TypeVar("T")


def load_config(
    profile: str | None = None,
    *,
    config_dir: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
    env_prefix: str | None = None,
    prefer: Sequence[str] | None = None,
) -> ConfigTree:
    """Return the effective configuration tree.

    Parameters
    ----------
    profile:
        Profile to overlay; when omitted the ``config.profile`` override and
        then the ``CONFIG_PROFILE`` environment variable are consulted.
    config_dir:
        Directory holding ``application.*``; defaults to the ``config.dir``
        override, the ``CONFIG_DIR`` variable, or the working directory.
    overrides:
        Process-level overrides keyed by dotted path (``{"http.port": 9090}``).
        Highest precedence.
    environ:
        Environment mapping; defaults to :data:`os.environ`.
    env_prefix:
        When set, ``<PREFIX>_HTTP__PORT`` style variables form an override
        layer just below *overrides*.
    prefer:
        File suffix preference (default ``conf``, ``toml``, ``json``,
        ``yaml``, ``yml``); the first existing file wins.

    Raises
    ------
    SourceLoadFailed
        A required file is missing or malformed, an override table is
        inconsistent, or a substitution cannot be resolved.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> _ = (Path(tmp.name) / "application.toml").write_text('[http]\\nport = 8080\\n', encoding="utf-8")
    >>> tree = load_config(config_dir=tmp.name, environ={}, overrides={"http.host": "0.0.0.0"})
    >>> tree.get("http.port"), tree.get("http.host"), tree.origin("http.host")["layer"]
    (8080, '0.0.0.0', 'overrides')
    >>> tmp.cleanup()
    """

    env = os.environ if environ is None else environ
    override_table = dict(overrides or {})
    directory = Path(config_dir or override_table.get(DIR_OVERRIDE) or env.get(DIR_ENV) or Path.cwd())
    active_profile = _first_present(profile, override_table.get(PROFILE_OVERRIDE), env.get(PROFILE_ENV))

    layers = [_load_file_layer("base", directory, BASENAME, prefer)]
    if active_profile:
        profile_layer = _load_file_layer("profile", directory, f"{BASENAME}-{active_profile}", prefer)
        log_info("profile_activated", **make_event("profile", profile_layer.path, {"profile": active_profile}))
        layers.append(profile_layer)

    secrets = FileSecretLoader(environ=env).load()
    if secrets:
        layers.append(Layer("secrets", secrets))

    if env_prefix:
        env_overrides = DefaultEnvLoader(environ=env).load(env_prefix)
        if env_overrides:
            layers.append(Layer("env", env_overrides))

    if override_table:
        try:
            layers.append(Layer("overrides", expand_dotted(override_table)))
        except ValueError as exc:
            raise SourceLoadFailed(f"Inconsistent process overrides: {exc}") from exc

    for layer in layers:
        log_debug("layer_loaded", **make_event(layer.name, layer.path, {"keys": len(layer.data)}))

    merged, meta = merge_layers(layers)
    resolved = resolve_substitutions(merged, environ=env)
    log_info("configuration_merged", layer="final", path=None, total_layers=len(layers))
    return ConfigTree(resolved, meta)


def render_effective(tree: ConfigTree, *, as_json: bool = False, indent: int | None = 2) -> str:
    """Render *tree* as HOCON (or JSON) with sensitive top-level keys redacted.

    >>> render_effective(ConfigTree({"db": {"pool-size": 5}, "api-token": "abc"}), as_json=True, indent=None)
    '{"db":{"pool-size":5},"api-token":"[REDACTED]"}'
    """

    redacted = redact_top_level(tree.as_dict())
    if as_json:
        return ConfigTree(redacted).to_json(indent=indent)
    return render_hocon(redacted)


def log_effective_config(tree: ConfigTree) -> None:
    """Log the effective tree at INFO with sensitive top-level keys redacted."""

    if not get_logger().isEnabledFor(logging.INFO):
        return
    rendered = render_effective(tree)
    log_info("effective_configuration", layer="final", path=None, config=rendered)


def bind(tree: ConfigTree, path: str, schema: type[T]) -> T:
    """Bind the block at *path* to *schema* with the default reflector and validator."""

    return Binder(RecordReflector()).bind(tree, path, schema)


def boot(
    schema: type[T],
    *,
    profile: str | None = None,
    config_dir: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
    env_prefix: str | None = None,
    prefer: Sequence[str] | None = None,
    binder: Binder | None = None,
    kebab_top_level: bool = False,
) -> T:
    """Load, bind, and validate the whole application configuration once.

    Each top-level field of *schema* must itself be a record schema; its raw
    field name is the block path (``http``, ``db``), unlike nested fields
    which use kebab-case keys. ``kebab_top_level=True`` applies the kebab rule
    to top-level blocks too.

    Raises
    ------
    BootFailed
        Wrapping whatever went wrong; the original error is ``__cause__``.
    """

    new_trace_id()
    active = binder or Binder(RecordReflector())
    schema_name = getattr(schema, "__name__", repr(schema))
    try:
        tree = load_config(
            profile,
            config_dir=config_dir,
            overrides=overrides,
            environ=environ,
            env_prefix=env_prefix,
            prefer=prefer,
        )
        log_effective_config(tree)
        blocks = [_bind_block(active, tree, spec, kebab_top_level) for spec in active.reflector.fields_of(schema)]
        aggregate = active.reflector.construct(schema, blocks)
    except Exception as exc:
        log_error("configuration_boot_failed", layer="final", path=None, schema=schema_name, error=str(exc))
        raise BootFailed(schema_name, exc) from exc
    log_info("configuration_bound", layer="final", path=None, schema=schema_name, blocks=len(blocks))
    return aggregate


def _bind_block(binder: Binder, tree: ConfigTree, spec: FieldSpec, kebab: bool) -> Any:
    if spec.kind is not FieldType.RECORD:
        raise UnsupportedType(spec.type_name, detail=f"top-level field {spec.name!r} must be a record schema")
    path = kebab_key(spec.name) if kebab else spec.name
    return binder.bind(tree, path, spec.annotation)


def _load_file_layer(layer: str, directory: Path, stem: str, prefer: Sequence[str] | None) -> Layer:
    candidate = _locate(directory, stem, prefer)
    if candidate is None:
        raise SourceLoadFailed(f"Required configuration file not found: {directory / (stem + '.conf')}")
    loader = FILE_LOADERS[candidate.suffix.lstrip(".").lower()]
    try:
        data = loader.load(str(candidate))
    except (NotFound, InvalidFormat) as exc:
        raise SourceLoadFailed(f"Failed to load {layer} configuration {candidate}: {exc}") from exc
    return Layer(layer, data, str(candidate))


def _locate(directory: Path, stem: str, prefer: Sequence[str] | None) -> Path | None:
    for suffix in _order_suffixes(prefer):
        candidate = directory / f"{stem}.{suffix}"
        if candidate.is_file():
            return candidate
    return None


def _order_suffixes(prefer: Sequence[str] | None) -> list[str]:
    """Order known suffixes so preferred ones come first (stable).

    >>> _order_suffixes(["yaml", ".toml"])
    ['yaml', 'toml', 'conf', 'json', 'yml']
    """

    known = list(FILE_LOADERS)
    if not prefer:
        return known
    ranking = {suffix.lower().lstrip("."): idx for idx, suffix in enumerate(prefer)}
    return sorted(known, key=lambda suffix: ranking.get(suffix, len(ranking)))


def _first_present(*candidates: object) -> str | None:
    for candidate in candidates:
        if candidate is not None and str(candidate).strip():
            return str(candidate).strip()
    return None


__all__ = [
    "BASENAME",
    "bind",
    "boot",
    "load_config",
    "log_effective_config",
    "render_effective",
]
