"""CLI adapter for ``lib_typed_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect the effective configuration and dry-run a schema boot
without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` - shared Click settings ensuring ``-h`` works.
* :func:`cli` - root command wiring traceback handling into ``lib_cli_exit_tools``.
* :func:`cli_info` - prints distribution metadata.
* :func:`cli_key` - shows the config key derived from field names.
* :func:`cli_dump` - prints the redacted effective tree.
* :func:`cli_check` - boots a ``module:Class`` schema and reports success.
* :func:`main` - entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer. Commands call the composition root (:mod:`lib_typed_config.core`)
and never reach into adapters directly; ``lib_cli_exit_tools`` owns the exit
code strategy.
"""

from __future__ import annotations

import importlib
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import boot, load_config, render_effective
from .domain.naming import kebab_key

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("lib_typed_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _source_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by commands that load configuration."""

    options = (
        click.option("--profile", default=None, help="Profile overlay to activate (application-<profile>.*)"),
        click.option(
            "--config-dir",
            type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True, readable=True),
            default=None,
            help="Directory holding application.* (defaults to CONFIG_DIR or CWD)",
        ),
        click.option(
            "-D",
            "--override",
            "overrides",
            multiple=True,
            metavar="KEY=VALUE",
            help="Process override for a dotted key (repeatable)",
        ),
        click.option("--env-prefix", default=None, help="Read <PREFIX>_SECTION__KEY environment overrides"),
        click.option("--prefer", multiple=True, help="Preferred file suffix ordering (repeatable)"),
    )
    for option in reversed(options):
        command = option(command)
    return command


@click.group(
    help="Typed, validated application configuration",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_typed_config",
    message="lib_typed_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for ``lib_cli_exit_tools``.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_typed_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_typed_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_typed_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.11')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("key", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("names", nargs=-1, required=True)
def cli_key(names: Sequence[str]) -> None:
    """Print the config key each field *name* is read from.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["key", "idleTimeout", "XMLHttpPort"])
    >>> result.output.splitlines()
    ['idleTimeout -> idle-timeout', 'XMLHttpPort -> xmlhttp-port']
    """

    for name in names:
        click.echo(f"{name} -> {kebab_key(name)}")


@cli.command("dump", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON instead of HOCON")
def cli_dump(
    profile: Optional[str],
    config_dir: Optional[Path],
    overrides: Sequence[str],
    env_prefix: Optional[str],
    prefer: Sequence[str],
    as_json: bool,
) -> None:
    """Print the effective configuration with sensitive top-level keys redacted."""

    tree = load_config(
        profile,
        config_dir=config_dir,
        overrides=_parse_overrides(overrides),
        env_prefix=env_prefix,
        prefer=_normalize_prefer(prefer),
    )
    click.echo(render_effective(tree, as_json=as_json))


@cli.command("check", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("schema_ref", metavar="SCHEMA")
@_source_options
@click.option(
    "--kebab-top-level/--raw-top-level",
    default=False,
    help="Derive top-level block names with the kebab-case rule",
    show_default=True,
)
def cli_check(
    schema_ref: str,
    profile: Optional[str],
    config_dir: Optional[Path],
    overrides: Sequence[str],
    env_prefix: Optional[str],
    prefer: Sequence[str],
    kebab_top_level: bool,
) -> None:
    """Boot the aggregate schema ``module:Class`` and report the outcome.

    Failures propagate so ``lib_cli_exit_tools`` prints them and exits non-zero.
    """

    schema = _import_schema(schema_ref)
    boot(
        schema,
        profile=profile,
        config_dir=config_dir,
        overrides=_parse_overrides(overrides),
        env_prefix=env_prefix,
        prefer=_normalize_prefer(prefer),
        kebab_top_level=kebab_top_level,
    )
    click.echo(f"Configuration OK: {schema.__name__}")


def _parse_overrides(values: Sequence[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` pairs into an override table.

    >>> _parse_overrides(["http.port=9090", "db.url=jdbc:x=y"])
    {'http.port': '9090', 'db.url': 'jdbc:x=y'}
    """

    table: dict[str, str] = {}
    for entry in values:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got {entry!r}", param_hint="-D/--override")
        table[key.strip()] = value
    return table


def _normalize_prefer(values: Sequence[str]) -> Optional[Sequence[str]]:
    """Normalise preferred suffixes to lowercase tuples without leading dots."""

    if not values:
        return None
    return tuple(value.lower().lstrip(".") for value in values)


def _import_schema(reference: str) -> type:
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise click.BadParameter("Schema must be given as module:Class", param_hint="SCHEMA")
    target: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)
    return target


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_typed_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
