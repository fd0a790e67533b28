"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``bach.toml`` only contains overrides.
An empty project needs no config file at all.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

JUNIT_CONSOLE_URI = (
    "http://central.maven.org/maven2/org/junit/platform/"
    "junit-platform-console-standalone/1.4.0/"
    "junit-platform-console-standalone-1.4.0.jar"
)


class Property(Enum):
    """Recognized configuration properties.

    Each member carries its dotted settings key and its default in string
    form.  :meth:`BachSettings.value` resolves a member against the
    loaded settings.
    """

    OFFLINE = ("offline", "false")
    PATH_CACHE_TOOLS = ("paths.cache_tools", ".bach/tools")
    PATH_CACHE_MODULES = ("paths.cache_modules", ".bach/modules")
    PROJECT_DORMANT = ("project.dormant", "false")
    PROJECT_NAME = ("project.name", "project")
    PROJECT_VERSION = ("project.version", "1.0.0-SNAPSHOT")
    TOOL_JUNIT_URI = ("tools.junit_uri", JUNIT_CONSOLE_URI)

    def __init__(self, key: str, default: str) -> None:
        self.key = key
        self.default = default


# --- bach.toml sections ---


class ProjectConfig(BaseModel):
    """[project] section.

    ``name`` stays unset unless configured; the project model falls back
    to the base directory's name.
    """

    model_config = {"frozen": True}

    name: str | None = None
    version: str = Property.PROJECT_VERSION.default
    dormant: bool = False


class PathsConfig(BaseModel):
    """[paths] section. Relative paths resolve against the project base."""

    model_config = {"frozen": True}

    cache_tools: Path = Path(Property.PATH_CACHE_TOOLS.default)
    cache_modules: Path = Path(Property.PATH_CACHE_MODULES.default)


class ToolsConfig(BaseModel):
    """[tools] section."""

    model_config = {"frozen": True}

    junit_uri: str = Property.TOOL_JUNIT_URI.default
