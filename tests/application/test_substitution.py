from __future__ import annotations

import pytest

from lib_typed_config.application.substitution import resolve_substitutions
from lib_typed_config.domain.errors import SourceLoadFailed
from lib_typed_config.domain.templates import Reference, Template, compile_templates


def resolve(data: dict[str, object], **kwargs: object) -> dict[str, object]:
    return resolve_substitutions(compile_templates(data), **kwargs)  # type: ignore[arg-type]


def test_whole_value_reference_keeps_type() -> None:
    resolved = resolve({"base": {"port": 8080}, "admin": {"port": "${base.port}"}})
    assert resolved["admin"]["port"] == 8080  # type: ignore[index]


def test_secret_bridges_to_schema_path() -> None:
    resolved = resolve({"DB_PASSWORD": "s3cret", "db": {"password": "${DB_PASSWORD}"}})
    assert resolved["db"]["password"] == "s3cret"  # type: ignore[index]


def test_embedded_reference_is_stringified() -> None:
    resolved = resolve({"host": "db", "port": 5432, "url": "jdbc:postgresql://${host}:${port}/app"})
    assert resolved["url"] == "jdbc:postgresql://db:5432/app"


def test_environment_is_consulted_after_tree() -> None:
    resolved = resolve({"user": "${APP_USER}", "host": "${HOST}"}, environ={"APP_USER": "svc", "HOST": "env"})
    assert resolved == {"user": "svc", "host": "env"}


def test_optional_reference_drops_key_or_empties_text() -> None:
    resolved = resolve({"a": "${?MISSING}", "b": "x${?MISSING}y"})
    assert resolved == {"b": "xy"}


def test_chained_references() -> None:
    resolved = resolve({"a": "${b}", "b": "${c}", "c": 3})
    assert resolved["a"] == 3


def test_unresolved_reference_fails() -> None:
    with pytest.raises(SourceLoadFailed, match=r"\$\{DB_PASSWORD\}"):
        resolve({"db": {"password": "${DB_PASSWORD}"}})


def test_cycle_is_detected() -> None:
    with pytest.raises(SourceLoadFailed, match="cycle"):
        resolve({"a": "${b}", "b": "${a}"})


def test_plain_values_pass_through() -> None:
    payload = {"http": {"port": 8080, "hosts": ["a", "b"], "debug": False}}
    assert resolve_substitutions(payload) == payload


def test_plain_strings_are_literal_even_with_reference_syntax() -> None:
    payload = {"DB_PASSWORD": "pa${ss}word", "greeting": "hello ${name}"}
    assert resolve_substitutions(payload) == payload


def test_referenced_literal_is_not_expanded_again() -> None:
    data = {"DB_PASSWORD": "pa${ss}word", "db": {"password": Template((Reference("DB_PASSWORD"),))}}
    assert resolve_substitutions(data)["db"] == {"password": "pa${ss}word"}
