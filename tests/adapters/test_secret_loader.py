from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lib_typed_config.adapters.secrets.files import FileSecretLoader


def test_reads_trimmed_secret_files(tmp_path: Path) -> None:
    password = tmp_path / "db_password"
    password.write_text("  testpassword \n", encoding="utf-8")
    token = tmp_path / "api_token"
    token.write_text("abc", encoding="utf-8")
    environ = {"DB_PASSWORD_FILE": str(password), "API_TOKEN_FILE": str(token), "HOME": "/home/app"}
    assert FileSecretLoader(environ=environ).load() == {"API_TOKEN": "abc", "DB_PASSWORD": "testpassword"}


def test_bare_suffix_is_ignored() -> None:
    assert FileSecretLoader(environ={"_FILE": "/nowhere"}).load() == {}


def test_unreadable_secret_becomes_empty_and_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="lib_typed_config")
    missing = tmp_path / "missing"
    secrets = FileSecretLoader(environ={"DB_PASSWORD_FILE": str(missing)}).load()
    assert secrets == {"DB_PASSWORD": ""}
    failures = [record for record in caplog.records if record.getMessage() == "secret_file_unreadable"]
    assert failures and failures[0].levelno == logging.ERROR
    assert failures[0].context["variable"] == "DB_PASSWORD_FILE"


def test_secret_values_are_not_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_typed_config")
    secret = tmp_path / "db_password"
    secret.write_text("hunter2", encoding="utf-8")
    FileSecretLoader(environ={"DB_PASSWORD_FILE": str(secret)}).load()
    assert "hunter2" not in caplog.text
    assert any(record.getMessage() == "secrets_resolved" for record in caplog.records)
