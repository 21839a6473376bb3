from __future__ import annotations

import pytest

from lib_typed_config.adapters.env.default import DefaultEnvLoader, assign_nested, default_env_prefix


def test_env_loader_nests_and_kebabs_keys() -> None:
    environ = {
        "BILLING_HTTP__PORT": "9090",
        "BILLING_HTTP__IDLE_TIMEOUT": "5s",
        "BILLING_DB__POOL_SIZE": "4",
        "BILLING_DEBUG": "true",
        "OTHER_HTTP__PORT": "1",
    }
    payload = DefaultEnvLoader(environ=environ).load(default_env_prefix("billing"))
    assert payload == {
        "http": {"port": 9090, "idle-timeout": "5s"},
        "db": {"pool-size": 4},
        "debug": True,
    }


def test_env_loader_coerces_primitives() -> None:
    payload = DefaultEnvLoader(environ={"APP_A": "null", "APP_B": "-3", "APP_C": "2.5", "APP_D": "text"}).load("APP_")
    assert payload == {"a": None, "b": -3, "c": 2.5, "d": "text"}


def test_env_loader_ignores_bare_prefix() -> None:
    assert DefaultEnvLoader(environ={"APP_": "x"}).load("APP") == {}


def test_assign_nested_refuses_to_replace_scalar() -> None:
    data: dict[str, object] = {"http": 1}
    with pytest.raises(ValueError, match="http"):
        assign_nested(data, ["http", "port"], 2)
