"""Adapter contract tests: default adapters satisfy the application ports."""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_typed_config.adapters.env.default import DefaultEnvLoader
from lib_typed_config.adapters.file_loaders.structured import FILE_LOADERS
from lib_typed_config.adapters.reflection.records import RecordReflector
from lib_typed_config.adapters.secrets.files import FileSecretLoader
from lib_typed_config.application import ports

SAMPLES = {
    "conf": 'service { value = 1 }\n',
    "toml": "[service]\nvalue = 1\n",
    "json": '{"service": {"value": 1}}',
    "yaml": "service:\n  value: 1\n",
    "yml": "service:\n  value: 1\n",
}


@pytest.mark.parametrize("suffix", sorted(FILE_LOADERS))
def test_file_loader_contract(tmp_path: Path, suffix: str) -> None:
    loader = FILE_LOADERS[suffix]
    assert isinstance(loader, ports.FileLoader)
    path = tmp_path / f"application.{suffix}"
    path.write_text(SAMPLES[suffix], encoding="utf-8")
    assert loader.load(str(path))["service"]["value"] == 1


def test_env_loader_contract() -> None:
    loader = DefaultEnvLoader(environ={"DEMO_SERVICE__RETRIES": "3"})
    assert isinstance(loader, ports.EnvLoader)
    assert loader.load("DEMO")["service"]["retries"] == 3


def test_secret_loader_contract() -> None:
    loader = FileSecretLoader(environ={})
    assert isinstance(loader, ports.SecretLoader)
    assert loader.load() == {}


def test_reflector_contract() -> None:
    assert isinstance(RecordReflector(), ports.SchemaReflector)
