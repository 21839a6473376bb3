"""Runtime-reflection backing for :class:`lib_typed_config.application.ports.SchemaReflector`.

Purpose
-------
Read record schemas declared as frozen dataclasses or ``typing.NamedTuple``
classes. Field kinds come from the annotations; constraints and integer width
come from ``typing.Annotated`` metadata::

    @dataclass(frozen=True)
    class HttpConfig:
        port: Annotated[Int32, Min(1), Max(65535)]
        host: Annotated[str, NotBlank()]
        idle_timeout: Annotated[timedelta, NotNull()]

Mutable dataclasses are not schemas: the resolved aggregate must be immutable
all the way down.
"""

from __future__ import annotations

import dataclasses
from datetime import timedelta
from typing import Annotated, Any, Sequence, get_args, get_origin, get_type_hints

from ...domain.constraints import Constraint
from ...domain.errors import UnsupportedType
from ...domain.schema import FieldSpec, FieldType, type_name

_PLAIN_KINDS: dict[Any, FieldType] = {
    bool: FieldType.BOOL,
    int: FieldType.INT64,
    float: FieldType.DOUBLE,
    str: FieldType.STRING,
    timedelta: FieldType.DURATION,
}


class RecordReflector:
    """Reflect frozen dataclasses and ``NamedTuple`` classes.

    Examples
    --------
    >>> from typing import NamedTuple
    >>> class Pool(NamedTuple):
    ...     size: int
    ...     name: str
    >>> reflector = RecordReflector()
    >>> [(spec.name, spec.kind.value) for spec in reflector.fields_of(Pool)]
    [('size', 'int64'), ('name', 'string')]
    >>> reflector.construct(Pool, [4, "main"])
    Pool(size=4, name='main')
    """

    def is_schema(self, candidate: Any) -> bool:
        if get_origin(candidate) is not None or not isinstance(candidate, type):
            return False
        if dataclasses.is_dataclass(candidate):
            return bool(candidate.__dataclass_params__.frozen)  # type: ignore[attr-defined]
        return issubclass(candidate, tuple) and hasattr(candidate, "_fields")

    def fields_of(self, schema: Any) -> tuple[FieldSpec, ...]:
        if not self.is_schema(schema):
            raise UnsupportedType(type_name(schema), detail="not a frozen dataclass or NamedTuple")
        hints = get_type_hints(schema, include_extras=True)
        return tuple(self._describe(name, hints[name]) for name in _field_names(schema))

    def construct(self, schema: Any, values: Sequence[Any]) -> Any:
        names = _field_names(schema)
        if len(names) != len(values):
            raise ValueError(f"{schema.__name__} expects {len(names)} values, got {len(values)}")
        return schema(**dict(zip(names, values)))

    def _describe(self, name: str, hint: Any) -> FieldSpec:
        base, metadata = _split_annotated(hint)
        constraints = tuple(item for item in metadata if isinstance(item, Constraint))
        declared = [item for item in metadata if isinstance(item, FieldType)]
        kind = declared[-1] if declared else self._kind_of(base)
        return FieldSpec(name=name, kind=kind, annotation=base, constraints=constraints)

    def _kind_of(self, base: Any) -> FieldType | None:
        try:
            kind = _PLAIN_KINDS.get(base)
        except TypeError:  # unhashable annotation objects
            kind = None
        if kind is not None:
            return kind
        if self.is_schema(base):
            return FieldType.RECORD
        return None


def _field_names(schema: Any) -> tuple[str, ...]:
    if dataclasses.is_dataclass(schema):
        return tuple(field.name for field in dataclasses.fields(schema) if field.init)
    return tuple(schema._fields)


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()
