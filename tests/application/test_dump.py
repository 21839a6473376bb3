from __future__ import annotations

from lib_typed_config.application.dump import REDACTED, is_sensitive, redact_top_level


def test_sensitive_markers_are_case_insensitive() -> None:
    assert is_sensitive("DB_PASSWORD")
    assert is_sensitive("clientSecret")
    assert is_sensitive("api-token")
    assert not is_sensitive("db")


def test_only_top_level_keys_are_redacted() -> None:
    data = {"DB_PASSWORD": "s3cret", "db": {"password": "s3cret"}, "http": {"port": 8080}}
    redacted = redact_top_level(data)
    assert redacted["DB_PASSWORD"] == REDACTED
    assert redacted["db"] == {"password": "s3cret"}
    assert redacted["http"] == {"port": 8080}
    assert data["DB_PASSWORD"] == "s3cret"
