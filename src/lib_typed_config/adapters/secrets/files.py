"""``*_FILE`` secret adapter.

Container platforms mount secrets as files and advertise their location via
environment variables such as ``DB_PASSWORD_FILE=/run/secrets/db``. This
adapter reads each such file and registers its trimmed contents under the
variable name minus the suffix (``DB_PASSWORD``).

A secret that cannot be read is logged and becomes an empty string instead of
aborting the load, so the failure surfaces later as a ``NotBlank`` violation
against the schema field that actually needs it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ...observability import log_error, log_info

SECRET_SUFFIX: Final[str] = "_FILE"


class FileSecretLoader:
    """Materialise secrets referenced by ``<NAME>_FILE`` environment variables.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> secret = Path(tmp.name) / "db_password"
    >>> _ = secret.write_text("  s3cret\\n", encoding="utf-8")
    >>> FileSecretLoader(environ={"DB_PASSWORD_FILE": str(secret), "HOME": "/root"}).load()
    {'DB_PASSWORD': 's3cret'}
    >>> tmp.cleanup()
    """

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def load(self) -> dict[str, str]:
        secrets: dict[str, str] = {}
        for variable in sorted(self._environ):
            if not variable.endswith(SECRET_SUFFIX) or len(variable) == len(SECRET_SUFFIX):
                continue
            name = variable[: -len(SECRET_SUFFIX)]
            secrets[name] = self._read(variable, self._environ[variable])
        if secrets:
            log_info("secrets_resolved", layer="secrets", path=None, count=len(secrets))
        return secrets

    def _read(self, variable: str, location: str) -> str:
        try:
            return Path(location).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            log_error("secret_file_unreadable", layer="secrets", path=location, variable=variable, error=str(exc))
            return ""
