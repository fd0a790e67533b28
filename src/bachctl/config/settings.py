"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``BACH_*`` prefix, ``__`` for nested sections
  3. TOML file: ``bach.toml`` at the project base
  4. Code defaults: baked into the section models

Resolution is pure given the loaded file: nothing here writes back to
the environment or the file.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bachctl.config.discovery import find_config
from bachctl.config.models import PathsConfig, ProjectConfig, Property, ToolsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``bach.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class BachSettings(BaseSettings):
    """Settings snapshot for one bachctl invocation.

    Attributes:
        base: Project base directory; relative paths resolve against it.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BACH_",
        "env_nested_delimiter": "__",
    }

    base: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    verbose: bool = False
    log_json: bool = False

    # --- Properties ---
    offline: bool = False
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base: Path | None = None,
        **cli_flags: Any,
    ) -> BachSettings:
        """Construct settings from a CLI invocation.

        Flags whose value is None are dropped so that they never shadow
        env or TOML values.
        """
        resolved_base = (base or Path.cwd()).absolute()
        toml_path = find_config(resolved_base, explicit=config_path)
        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(base=resolved_base, config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    @property
    def project_name(self) -> str:
        """Configured project name, else the base directory's name, else ``project``."""
        return self.project.name or self.base.name or Property.PROJECT_NAME.default

    def value(self, prop: Property) -> str:
        """Resolve *prop* to its string form, falling back to its default."""
        if prop is Property.PROJECT_NAME:
            return self.project_name
        node: Any = self
        for part in prop.key.split("."):
            node = getattr(node, part)
        if node is None:
            return prop.default
        if isinstance(node, bool):
            return str(node).lower()
        return str(node)

    def based(self, path: str | Path) -> Path:
        """Resolve *path* against the project base unless it is absolute."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self.base / p
