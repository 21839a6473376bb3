"""Temporary config directories with an isolated environment mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

BASE_TOML = """\
[http]
host = "localhost"
port = 8080
idle-timeout = "60s"

[db]
url = "jdbc:postgresql://localhost:5432/test"
user = "testuser"
password = "${DB_PASSWORD}"
pool-size = 10
timeout = "5s"
"""


@dataclass
class ConfigSandbox:
    """A config directory plus the environment a boot should see."""

    root: Path
    env: dict[str, str] = field(default_factory=dict)

    def write(self, name: str, content: str) -> Path:
        target = self.root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    def secret(self, name: str, value: str) -> Path:
        """Write a secret file and advertise it through ``<name>_FILE``."""

        target = self.write(f"secrets/{name.lower()}", value)
        self.env[f"{name}_FILE"] = str(target)
        return target


def create_config_sandbox(tmp_path: Path, *, base: str | None = BASE_TOML, password: str | None = "testpassword") -> ConfigSandbox:
    sandbox = ConfigSandbox(tmp_path / "config")
    sandbox.root.mkdir(parents=True, exist_ok=True)
    if base is not None:
        sandbox.write("application.toml", base)
    if password is not None:
        sandbox.secret("DB_PASSWORD", password)
    return sandbox
