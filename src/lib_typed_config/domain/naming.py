"""Config key derivation from schema field names."""

from __future__ import annotations

import re

_BOUNDARY = re.compile(r"([a-z])([A-Z]+)")


def kebab_key(name: str) -> str:
    """Derive the config key for the field called *name*.

    A single hyphen goes between each lowercase letter and the uppercase run
    that follows it, the result is lowercased, and underscores become hyphens
    so snake_case and camelCase spellings address the same key. Runs of
    capitals are not split: ``XMLHttpPort`` becomes ``xmlhttp-port``.

    Examples
    --------
    >>> [kebab_key(n) for n in ("port", "poolSize", "idleTimeout", "XMLHttpPort", "pool_size")]
    ['port', 'pool-size', 'idle-timeout', 'xmlhttp-port', 'pool-size']
    """

    return _BOUNDARY.sub(r"\1-\2", name).lower().replace("_", "-")
