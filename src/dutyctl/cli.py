"""Root CLI group for dutyctl with global flags and command registration."""

from __future__ import annotations

import click

from dutyctl import __version__
from dutyctl.commands import register_commands
from dutyctl.commands._context import AppContext
from dutyctl.config.settings import DutySettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dutyctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-s",
    "--snapshot",
    "snapshot_path",
    default=None,
    type=click.Path(dir_okay=False, resolve_path=True),
    help="Roster dataset file (overrides [roster] snapshot).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    snapshot_path: str | None,
) -> None:
    """dutyctl: duty roster scope, eligibility, and fairness."""
    ctx.ensure_object(dict)
    settings = DutySettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        snapshot_path=snapshot_path,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
