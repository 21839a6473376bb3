from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest
from pyhocon import ConfigFactory

from lib_typed_config.adapters.file_loaders.structured import (
    FILE_LOADERS,
    HOCONFileLoader,
    JSONFileLoader,
    TOMLFileLoader,
    YAMLFileLoader,
    render_hocon,
)
from lib_typed_config.application.substitution import resolve_substitutions
from lib_typed_config.domain.errors import InvalidFormat, NotFound
from lib_typed_config.domain.templates import Reference, Template
from lib_typed_config.domain.tree import ConfigTree


def test_hocon_loader(tmp_path: Path) -> None:
    path = tmp_path / "application.conf"
    path.write_text(
        'http { host = "localhost", port = 8080, idle-timeout = 60s }\n'
        "admin { port = ${http.port} }\n",
        encoding="utf-8",
    )
    data = HOCONFileLoader().load(str(path))
    assert data["admin"]["port"] == Template((Reference("http.port"),))
    tree = ConfigTree(resolve_substitutions(data))
    assert tree.get_string("http.host") == "localhost"
    assert tree.get_int("http.port") == 8080
    assert tree.get_duration("http.idle-timeout") == timedelta(seconds=60)
    assert tree.get_int("admin.port") == 8080
    assert isinstance(data["http"], dict)


def test_hocon_loader_leaves_unknown_references_for_later(tmp_path: Path) -> None:
    path = tmp_path / "application.conf"
    path.write_text("db { password = ${LIB_TYPED_CONFIG_TEST_UNSET_SECRET} }\n", encoding="utf-8")
    data = HOCONFileLoader().load(str(path))
    resolved = resolve_substitutions(data, environ={"LIB_TYPED_CONFIG_TEST_UNSET_SECRET": "s3cret"})
    assert resolved["db"]["password"] == "s3cret"


def test_hocon_quoted_text_is_literal(tmp_path: Path) -> None:
    path = tmp_path / "application.conf"
    path.write_text('tmpl { text = "hello ${name}" }\n', encoding="utf-8")
    data = HOCONFileLoader().load(str(path))
    assert data == {"tmpl": {"text": "hello ${name}"}}
    assert resolve_substitutions(data) == data


def test_hocon_concatenation_becomes_template(tmp_path: Path) -> None:
    path = tmp_path / "application.conf"
    path.write_text('db { host = "db", url = "jdbc:postgresql://"${db.host}":5432/app" }\n', encoding="utf-8")
    data = HOCONFileLoader().load(str(path))
    assert isinstance(data["db"]["url"], Template)
    assert resolve_substitutions(data)["db"]["url"] == "jdbc:postgresql://db:5432/app"


def test_toml_strings_with_references_become_templates(tmp_path: Path) -> None:
    path = tmp_path / "application.toml"
    path.write_text('[db]\npassword = "${DB_PASSWORD}"\nuser = "sa"\n', encoding="utf-8")
    data = TOMLFileLoader().load(str(path))
    assert data["db"] == {"password": Template((Reference("DB_PASSWORD"),)), "user": "sa"}


def test_hocon_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "application.conf"
    path.write_text("http { port = 8080\n", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        HOCONFileLoader().load(str(path))


def test_toml_loader(tmp_path: Path) -> None:
    path = tmp_path / "application.toml"
    path.write_text("[db]\npool-size = 10\n", encoding="utf-8")
    assert TOMLFileLoader().load(str(path))["db"]["pool-size"] == 10


def test_toml_loader_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NotFound):
        TOMLFileLoader().load(str(tmp_path / "missing.toml"))


def test_json_loader_invalid(tmp_path: Path) -> None:
    path = tmp_path / "application.json"
    path.write_text("{invalid}", encoding="utf-8")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_json_loader_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "application.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(InvalidFormat):
        JSONFileLoader().load(str(path))


def test_yaml_loader_handles_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "application.yaml"
    path.write_text("# empty file\n", encoding="utf-8")
    assert YAMLFileLoader().load(str(path)) == {}


def test_non_utf8_is_invalid(tmp_path: Path) -> None:
    path = tmp_path / "application.toml"
    path.write_bytes(b"\xff\xfe[http]")
    with pytest.raises(InvalidFormat):
        TOMLFileLoader().load(str(path))


def test_suffix_registry_order() -> None:
    assert list(FILE_LOADERS) == ["conf", "toml", "json", "yaml", "yml"]


def test_render_hocon_round_trips_through_pyhocon() -> None:
    rendered = render_hocon({"http": {"port": 8080, "idle-timeout": timedelta(minutes=1)}, "DB_PASSWORD": "[REDACTED]"})
    assert "{" in rendered and not rendered.lstrip().startswith("{")
    reparsed = ConfigFactory.parse_string(rendered)
    assert reparsed.get_int("http.port") == 8080
    assert reparsed.get_string("DB_PASSWORD") == "[REDACTED]"
    assert "1m" in rendered
