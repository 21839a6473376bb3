from __future__ import annotations

import pytest

from lib_typed_config.domain.constraints import Max, Min, NotBlank, NotNull, Pattern, Positive, Violation


@pytest.mark.parametrize(
    ("constraint", "value", "message"),
    [
        (NotBlank(), "", "must not be blank"),
        (NotBlank(), " \t", "must not be blank"),
        (NotBlank(), "db", None),
        (NotNull(), None, "must not be null"),
        (NotNull(), 0, None),
        (Pattern("^jdbc:.*"), "http://invalid", 'must match "^jdbc:.*"'),
        (Pattern("^jdbc:.*"), "jdbc:h2:mem:", None),
        (Min(1), 0, "must be greater than or equal to 1"),
        (Min(1), 1, None),
        (Max(65535), 99999, "must be less than or equal to 65535"),
        (Max(65535), 65535, None),
        (Positive(), 0, "must be positive"),
        (Positive(), 0.1, None),
    ],
)
def test_constraint_messages(constraint, value, message) -> None:
    assert constraint.check(value) == message


def test_pattern_requires_full_match() -> None:
    assert Pattern("[a-z]+").check("abc1") == 'must match "[a-z]+"'


def test_applicability() -> None:
    assert NotBlank.applies_to == frozenset({"string"})
    assert Positive.applies_to == frozenset({"int32", "int64", "double"})
    assert NotNull.applies_to is None and NotNull.null_sensitive


def test_constraints_compare_by_value() -> None:
    assert Pattern("^a") == Pattern("^a")
    assert Min(1) != Min(2)


def test_violation_renders_path_then_message() -> None:
    assert str(Violation("http.port", "must be positive")) == "http.port must be positive"
