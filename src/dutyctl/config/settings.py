"""DutySettings: CLI flags, ``DUTYCTL_*`` env vars, and ``dutyctl.toml``.

Sources are merged highest first: CLI flags, environment, the TOML file
found by :func:`find_config`, then the defaults on the section models.
Nested env vars use ``__`` (``DUTYCTL_FAIRNESS__TOP_N=5``).
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from dutyctl.config.discovery import find_config
from dutyctl.config.models import FairnessConfig, RanksConfig, RosterConfig

# The TOML file chosen by from_cli() for the settings object being built.
_toml_file: ContextVar[Path | None] = ContextVar("_toml_file", default=None)


class DutySettings(BaseSettings):
    """Frozen settings shared by the CLI and library callers.

    Attributes:
        roster_root: Base for relative paths: the config file's directory,
            or the working directory when there is no config file.
        config_path: The config file in effect, or None.
        snapshot_path: ``--snapshot`` override of ``[roster] snapshot``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DUTYCTL_",
        "env_nested_delimiter": "__",
    }

    roster_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    snapshot_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    roster: RosterConfig = Field(default_factory=RosterConfig)
    fairness: FairnessConfig = Field(default_factory=FairnessConfig)
    ranks: RanksConfig = Field(default_factory=RanksConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _toml_file.get()
        if toml_file is None:
            return (init_settings, env_settings)
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
        )

    @property
    def resolved_snapshot(self) -> Path:
        """Absolute path of the roster dataset file."""
        path = self.snapshot_path or Path(self.roster.snapshot)
        return path if path.is_absolute() else self.roster_root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        roster_root: Path | None = None,
        **cli_flags: Any,
    ) -> DutySettings:
        """Build settings for one invocation.

        An explicit *config_path* wins over walk-up discovery from
        *roster_root*. Flags passed as None are left to lower sources.

        Raises:
            click.ClickException: the config file is not valid TOML.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(roster_root)

        if roster_root is None:
            roster_root = toml_path.parent if toml_path else Path.cwd()

        flags = {name: value for name, value in cli_flags.items() if value is not None}
        token = _toml_file.set(toml_path)
        try:
            return cls(roster_root=roster_root, config_path=toml_path, **flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _toml_file.reset(token)
