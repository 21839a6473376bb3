"""Declarative constraint evaluation.

Purpose
-------
Check a fully assembled record against the constraints attached to its
fields. The validator is stateless: it holds only the reflector used to read
field metadata and can be shared or recreated freely.

System Role
-----------
:class:`lib_typed_config.application.binder.Binder` calls :meth:`Validator.check`
once per bound block, after construction. Validation visits every field
(recursing into nested records with dotted paths) and never short-circuits, so
one failure report lists every violation.
"""

from __future__ import annotations

from typing import Any

from ..domain.constraints import Constraint, Violation
from ..domain.errors import UnsupportedType, ValidationFailed
from ..domain.schema import FieldSpec, FieldType
from .ports import SchemaReflector


class Validator:
    """Evaluate catalogue constraints on record instances.

    A constraint attached to a field kind it cannot judge (``Min`` on a
    string, ``Pattern`` on a duration) is a schema defect and raises
    :class:`UnsupportedType` rather than a violation.
    """

    def __init__(self, reflector: SchemaReflector) -> None:
        self._reflector = reflector

    def validate(self, instance: Any) -> list[Violation]:
        """Return every violation found in *instance*, sorted deterministically."""

        violations: list[Violation] = []
        self._visit(instance, type(instance), "", violations)
        return sorted(violations, key=str)

    def check(self, instance: Any) -> None:
        """Raise :class:`ValidationFailed` when *instance* has any violation."""

        violations = self.validate(instance)
        if violations:
            raise ValidationFailed(violations)

    def _visit(self, instance: Any, schema: Any, prefix: str, sink: list[Violation]) -> None:
        for spec in self._reflector.fields_of(schema):
            path = f"{prefix}.{spec.name}" if prefix else spec.name
            value = getattr(instance, spec.name)
            for constraint in spec.constraints:
                _ensure_applicable(constraint, spec)
                if value is None and not constraint.null_sensitive:
                    continue
                message = constraint.check(value)
                if message is not None:
                    sink.append(Violation(path, message))
            if spec.kind is FieldType.RECORD and value is not None:
                self._visit(value, spec.annotation, path, sink)


def _ensure_applicable(constraint: Constraint, spec: FieldSpec) -> None:
    allowed = constraint.applies_to
    if allowed is None:
        return
    if spec.kind is None or spec.kind.value not in allowed:
        raise UnsupportedType(
            spec.type_name,
            detail=f"{type(constraint).__name__} cannot constrain field {spec.name!r}",
        )
