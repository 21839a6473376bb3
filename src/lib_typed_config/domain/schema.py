"""Schema vocabulary shared by reflectors, the binder, and the validator.

Contents
--------
* :class:`FieldType` - the closed set of semantic leaf types.
* :data:`Int32` / :data:`Int64` - ``Annotated`` aliases selecting integer width.
* :class:`FieldSpec` - one reflected field (name, kind, constraints).
* :func:`type_name` - display name for annotations used in error messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, get_origin

from .constraints import Constraint


class FieldType(Enum):
    """Semantic types a field may declare."""

    INT32 = "int32"
    INT64 = "int64"
    DOUBLE = "double"
    STRING = "string"
    BOOL = "bool"
    DURATION = "duration"
    RECORD = "sub-schema"


NUMERIC_TYPES = frozenset({FieldType.INT32, FieldType.INT64, FieldType.DOUBLE})

Int32 = Annotated[int, FieldType.INT32]
"""A 32-bit signed integer field; out-of-range leaves fail with ``WrongType``."""

Int64 = Annotated[int, FieldType.INT64]
"""A 64-bit signed integer field (the default for plain ``int``)."""


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A single reflected field of a record schema.

    Attributes
    ----------
    name:
        Python attribute name; the config key is derived from it.
    kind:
        Semantic type, or ``None`` when the annotation is unsupported.
    annotation:
        Base annotation with ``Annotated`` metadata stripped. For sub-schemas
        this is the nested record class.
    constraints:
        Catalogue constraints attached through ``Annotated`` metadata.
    """

    name: str
    kind: FieldType | None
    annotation: Any
    constraints: tuple[Constraint, ...] = ()

    @property
    def type_name(self) -> str:
        return type_name(self.annotation)


def type_name(annotation: Any) -> str:
    """Return a short display name for *annotation*.

    Generic aliases are named after their capitalised origin so that
    ``list[str]`` and ``typing.List[str]`` both read as ``List``.

    Examples
    --------
    >>> type_name(int), type_name(list[str]), type_name(dict[str, int])
    ('int', 'List', 'Dict')
    """

    origin = get_origin(annotation)
    target = origin if origin is not None else annotation
    name = getattr(target, "__name__", None) or getattr(target, "_name", None) or repr(target)
    if origin is not None:
        return name[:1].upper() + name[1:]
    return name
