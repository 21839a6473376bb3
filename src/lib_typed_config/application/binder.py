"""Schema-driven binder.

Purpose
-------
Populate one record schema from one block of a :class:`ConfigTree`. For each
field, in schema order, the binder derives the kebab-case key, checks the key
is present, reads the leaf through the tree accessor for the field's semantic
type, and finally constructs the record and hands it to the validator.

Failure Semantics
-----------------
Every failure raises before anything is returned; callers never observe a
partially populated record. Nested records are assembled recursively and
validated together with their parent so violation paths read ``tls.port``.
"""

from __future__ import annotations

from typing import Any, Callable

from ..domain.errors import KeyMissing, PathMissing, UnsupportedType
from ..domain.naming import kebab_key
from ..domain.schema import FieldSpec, FieldType
from ..domain.tree import ConfigTree
from .ports import SchemaReflector
from .validator import Validator

_READERS: dict[FieldType, Callable[[ConfigTree, str], Any]] = {
    FieldType.INT32: ConfigTree.get_int,
    FieldType.INT64: ConfigTree.get_long,
    FieldType.DOUBLE: ConfigTree.get_double,
    FieldType.STRING: ConfigTree.get_string,
    FieldType.BOOL: ConfigTree.get_bool,
    FieldType.DURATION: ConfigTree.get_duration,
}


class Binder:
    """Bind configuration blocks to record schemas.

    Parameters
    ----------
    reflector:
        Source of field metadata and record construction.
    validator:
        Constraint validator; defaults to a :class:`Validator` sharing the
        reflector.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> from lib_typed_config.adapters.reflection.records import RecordReflector
    >>> @dataclass(frozen=True)
    ... class Pool:
    ...     max_size: int
    >>> Binder(RecordReflector()).bind(ConfigTree({"pool": {"max-size": 4}}), "pool", Pool)
    Pool(max_size=4)
    """

    def __init__(self, reflector: SchemaReflector, validator: Validator | None = None) -> None:
        self._reflector = reflector
        self._validator = validator or Validator(reflector)

    @property
    def reflector(self) -> SchemaReflector:
        return self._reflector

    def bind(self, tree: ConfigTree, path: str, schema: Any) -> Any:
        """Return a validated instance of *schema* built from the block at *path*.

        Raises
        ------
        PathMissing
            *tree* has no block at *path*.
        KeyMissing
            A field's derived key is absent.
        WrongType
            A leaf cannot be read as the declared type.
        UnsupportedType
            A field declares a type outside the supported set.
        ValidationFailed
            One or more constraints failed.
        """

        if not tree.has_path(path):
            raise PathMissing(path)
        instance = self._assemble(tree.get_config(path), schema)
        self._validator.check(instance)
        return instance

    def _assemble(self, block: ConfigTree, schema: Any) -> Any:
        values = [self._read(block, spec) for spec in self._reflector.fields_of(schema)]
        return self._reflector.construct(schema, values)

    def _read(self, block: ConfigTree, spec: FieldSpec) -> Any:
        key = kebab_key(spec.name)
        if not block.has_path(key):
            raise KeyMissing(block.root, key, origin=block.origin_description())
        if spec.kind is FieldType.RECORD:
            return self._assemble(block.get_config(key), spec.annotation)
        reader = _READERS.get(spec.kind) if spec.kind is not None else None
        if reader is None:
            raise UnsupportedType(spec.type_name)
        return reader(block, key)
