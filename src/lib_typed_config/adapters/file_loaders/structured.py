"""Structured configuration file loaders.

Purpose
-------
Convert on-disk artifacts into plain Python mappings the merge layer
understands, and render mappings back to HOCON text for the effective-config
dump. Loaders are thin wrappers around ``pyhocon``/``tomllib``/``json``/
``yaml.safe_load`` so error handling and logging live in one place.

Contents
--------
* :class:`BaseFileLoader` - shared read and mapping checks.
* :class:`HOCONFileLoader` - the canonical ``application.conf`` format.
* :class:`TOMLFileLoader`, :class:`JSONFileLoader`, :class:`YAMLFileLoader`.
* :data:`FILE_LOADERS` - loaders keyed by file suffix.
* :func:`render_hocon` - non-JSON, comment-free HOCON rendering.

System Role
-----------
Invoked by :func:`lib_typed_config.core.load_config` for the base and profile
layers.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pyhocon import ConfigFactory, HOCONConverter
from pyhocon.config_tree import ConfigQuotedString, ConfigSubstitution, ConfigValues, NoneValue
from pyhocon.exceptions import ConfigException
from pyparsing import ParseBaseException

from ...domain.durations import format_duration
from ...domain.errors import InvalidFormat, NotFound
from ...domain.templates import Reference, Template, compile_templates
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "file"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"port = 8080")
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:4]
        b'port'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        return payload

    def _decode(self, path: str) -> str:
        try:
            return self._read(path).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise self._invalid(path, exc) from exc

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("config_file_invalid", layer="file", path=path, format=self.format_name, error=str(exc))
        return InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}")

    def _ensure_mapping(self, data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* is a mapping, otherwise raise ``InvalidFormat``."""

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        log_debug("config_file_loaded", layer="file", path=path, format=self.format_name)
        return data


class HOCONFileLoader(BaseFileLoader):
    """Load HOCON documents with ``pyhocon``.

    ``include`` statements resolve relative to the file's directory. Unquoted
    ``${path}`` substitutions become :class:`Template` values resolved after
    every layer is merged, so they may refer to secrets or to keys a profile
    overrides. Quoted strings are literals and keep any ``${`` text as is.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "application.conf"
    >>> _ = target.write_text('http { host = "localhost", port = 8080 }', encoding="utf-8")
    >>> HOCONFileLoader().load(str(target))
    {'http': {'host': 'localhost', 'port': 8080}}
    >>> tmp.cleanup()
    """

    format_name = "hocon"

    def load(self, path: str) -> Mapping[str, object]:
        text = self._decode(path)
        try:
            tree = ConfigFactory.parse_string(
                text,
                basedir=str(Path(path).parent),
                resolve=False,
            )
            data = _plain(tree)
        except (ConfigException, ParseBaseException, ValueError) as exc:
            raise self._invalid(path, exc) from exc
        return self._ensure_mapping(data, path=path)


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._decode(path))
        except tomllib.TOMLDecodeError as exc:
            raise self._invalid(path, exc) from exc
        return self._ensure_mapping(compile_templates(data), path=path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._decode(path))
        except json.JSONDecodeError as exc:
            raise self._invalid(path, exc) from exc
        return self._ensure_mapping(compile_templates(data), path=path)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents; an empty document is an empty mapping."""

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._decode(path))
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        return self._ensure_mapping(compile_templates({} if data is None else data), path=path)


#: Loaders keyed by suffix, in default preference order.
FILE_LOADERS: dict[str, BaseFileLoader] = {
    "conf": HOCONFileLoader(),
    "toml": TOMLFileLoader(),
    "json": JSONFileLoader(),
    "yaml": YAMLFileLoader(),
    "yml": YAMLFileLoader(),
}


def render_hocon(data: Mapping[str, Any]) -> str:
    """Render *data* as HOCON without JSON syntax or origin comments.

    Durations are written back in suffix form (``60s`` becomes ``"1m"``).
    """

    return HOCONConverter.to_hocon(ConfigFactory.from_dict(_renderable(data)))


def _plain(value: Any) -> Any:
    """Convert pyhocon containers into plain ``dict``/``list`` values."""

    if isinstance(value, Mapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, NoneValue):
        return None
    if isinstance(value, ConfigValues):
        return _template(value)
    if isinstance(value, ConfigQuotedString):
        return value.value
    return value


def _template(values: ConfigValues) -> Template:
    """Turn an unresolved pyhocon value concatenation into a :class:`Template`."""

    tokens = [token for token in values.tokens if token is not None]
    parts: list[str | Reference] = []
    for index, token in enumerate(tokens):
        last = index == len(tokens) - 1
        if isinstance(token, ConfigSubstitution):
            parts.append(Reference(token.variable.strip(), optional=bool(token.optional)))
            if token.ws and not last:
                parts.append(token.ws)
        elif isinstance(token, ConfigQuotedString):
            parts.append(token.value if last else token.value + token.ws)
        elif isinstance(token, NoneValue):
            continue
        elif isinstance(token, (Mapping, list)):
            raise ValueError("substitutions inside object or list concatenation are not supported")
        elif isinstance(token, bool):
            parts.append("true" if token else "false")
        else:
            parts.append(str(token))
    return Template(tuple(parts))


def _renderable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _renderable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_renderable(item) for item in value]
    if isinstance(value, timedelta):
        return format_duration(value)
    return value
