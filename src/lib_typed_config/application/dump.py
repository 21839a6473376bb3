"""Redaction for the effective-configuration dump.

Only top-level keys are inspected. The dump is an operator debugging aid, not
a security boundary: nested secrets such as ``db.password`` are rendered as-is.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

REDACTED: Final[str] = "[REDACTED]"
SENSITIVE_MARKERS: Final[tuple[str, ...]] = ("password", "secret", "token")


def is_sensitive(key: str) -> bool:
    """Return ``True`` when *key* looks like it carries a secret.

    >>> is_sensitive("DB_PASSWORD"), is_sensitive("api-token"), is_sensitive("http")
    (True, True, False)
    """

    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_MARKERS)


def redact_top_level(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy *data* replacing the values of sensitive top-level keys.

    >>> redact_top_level({"DB_PASSWORD": "s3cret", "http": {"port": 8080}})
    {'DB_PASSWORD': '[REDACTED]', 'http': {'port': 8080}}
    """

    return {key: REDACTED if is_sensitive(key) else value for key, value in data.items()}
