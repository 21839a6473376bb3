from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_typed_config.domain.naming import kebab_key
from lib_typed_config.domain.tree import ConfigTree


@pytest.mark.parametrize(
    ("name", "key"),
    [
        ("port", "port"),
        ("poolSize", "pool-size"),
        ("idleTimeout", "idle-timeout"),
        ("maxHTTPConnections", "max-httpconnections"),
        ("XMLHttpPort", "xmlhttp-port"),
        ("pool_size", "pool-size"),
        ("idle_timeout", "idle-timeout"),
    ],
)
def test_kebab_key(name: str, key: str) -> None:
    assert kebab_key(name) == key


def test_snake_and_camel_spellings_share_a_key() -> None:
    assert kebab_key("idle_timeout") == kebab_key("idleTimeout")


FIELD_NAME = st.from_regex(r"[a-z][a-zA-Z0-9_]{0,15}", fullmatch=True)


@given(FIELD_NAME)
def test_kebab_key_is_idempotent(name: str) -> None:
    assert kebab_key(kebab_key(name)) == kebab_key(name)


@given(FIELD_NAME, st.integers(min_value=-(2**63), max_value=2**63 - 1))
def test_value_written_under_derived_key_reads_back(name: str, value: int) -> None:
    key = kebab_key(name)
    tree = ConfigTree({"block": {key: value}})
    assert tree.get_config("block").get_long(key) == value
