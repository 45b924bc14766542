"""AppContext: the object every command receives through ``@click.pass_obj``.

It owns the settings, opens the roster on first use, and turns a
ServiceResult into output and an exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.output.formatters import OutputSettings, format_result
from dutyctl.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from dutyctl.config.settings import DutySettings
    from dutyctl.infrastructure.roster import Roster


class AppContext:
    """Per-invocation state built by the root group.

    ``--help``, ``--version`` and ``--examples`` never open the roster.
    """

    def __init__(self, settings: DutySettings) -> None:
        self.settings = settings
        self._roster: Roster | None = None

        from dutyctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from dutyctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def roster(self) -> Roster:
        """The roster, with its first snapshot published.

        An unreadable or invalid snapshot file ends the command with a
        ``SNAPSHOT_INVALID`` error.
        """
        if self._roster is None:
            from dutyctl.infrastructure.loader import SnapshotError
            from dutyctl.infrastructure.roster import Roster

            roster = Roster(self.settings)
            roster.init_plugins()
            try:
                roster.reload()
            except SnapshotError as exc:
                self.emit(
                    failure(
                        "load_snapshot",
                        ErrorCode.SNAPSHOT_INVALID,
                        exc.reason,
                        path=str(exc.path),
                    )
                )
            self._roster = roster
        return self._roster

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successful output goes to stdout and its warnings to stderr as
        ``WARNING:`` lines (omitted under ``--json``, where they are part
        of the payload). A failure is printed to stderr and exits 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
