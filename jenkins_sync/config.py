"""Runtime configuration — merged from package.json, .env, environment and CLI.

Uses pydantic-settings.  Sources, lowest priority first:

1. ``config.jenkins`` in ``package.json`` of the working directory
   (``username`` and ``password`` are dropped; credentials do not belong
   in a committed file).
2. A ``.env`` file in the working directory.
3. ``JENKINS_*`` environment variables.
4. Keyword overrides, which the CLI fills from its flags.

Examples
--------
Via environment::

    export JENKINS_HOST=https://ci.example.com
    export JENKINS_USERNAME=deploy
    export JENKINS_PASSWORD=<api token>
    export JENKINS_PROJECTS=web,api

Or via package.json::

    {"config": {"jenkins": {"projects": ["web", "api"], "default": "web"}}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

_CREDENTIAL_KEYS = ("username", "password")


class ConfigurationError(ValueError):
    """Raised when required settings are missing.

    Attributes
    ----------
    problems:
        One human-readable line per missing setting.
    """

    def __init__(self, problems: list[str]) -> None:
        super().__init__("\n".join(problems))
        self.problems = problems


class UnknownProjectError(LookupError):
    """Raised when a requested project is not in the configured list."""

    def __init__(self, project: str | None, available: list[str]) -> None:
        super().__init__(
            f'Project "{project}" is not available. '
            f"Available projects: {', '.join(available)}"
        )
        self.project = project
        self.available = available


class PackageJsonSettingsSource(PydanticBaseSettingsSource):
    """Reads ``config.jenkins`` from ``package.json`` in the working directory."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None = None) -> None:
        super().__init__(settings_cls)
        self._path = path or Path.cwd() / "package.json"
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except ValueError:
            logger.warning("Ignoring unreadable %s", self._path)
            return {}
        section: Any = document
        for owner, key in (("top level", "config"), ("config", "jenkins")):
            if not isinstance(section, dict):
                logger.warning("Ignoring %s: %s is not a JSON object", self._path, owner)
                return {}
            section = section.get(key)
            if section is None:
                return {}
        if not isinstance(section, dict):
            logger.warning("Ignoring %s: config.jenkins is not a JSON object", self._path)
            return {}
        return {k: v for k, v in section.items() if k not in _CREDENTIAL_KEYS}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self._data.items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):
    """Merged jenkins-sync settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="JENKINS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server and credentials
    host: str | None = None
    username: str | None = None
    password: str | None = None
    timeout: float = 30.0

    # Projects
    projects: Annotated[list[str], NoDecode] = []
    default: str | None = None
    directory: Path = Path(".")

    # Build watching
    watch: bool = True
    poll_interval: float = 1.0
    idle_after: float = 3.0

    log_level: str = "WARNING"

    @field_validator("projects", mode="before")
    @classmethod
    def _split_projects(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PackageJsonSettingsSource(settings_cls),
            file_secret_settings,
        )

    def require_connection(self) -> None:
        """Raise ``ConfigurationError`` listing every missing required setting."""
        problems: list[str] = []
        if not self.username or not self.password:
            problems.append(
                "Missing credentials. Provide them as cli flags or place a .env file "
                f"in {Path.cwd()} [--username, --password]"
            )
        if not self.host:
            problems.append(
                f"Missing host. Provide it as cli flag or place a .env file in {Path.cwd()} [--host]"
            )
        if not self.projects:
            problems.append(
                "Missing projects. Provide them as cli flag or place a .env file "
                f"in {Path.cwd()} [--project-list]"
            )
        if problems:
            raise ConfigurationError(problems)

    def project_name(self, requested: str | None = None) -> str:
        """Return *requested* (or the default project) if it is configured."""
        name = requested or self.default
        if name is None or name not in self.projects:
            raise UnknownProjectError(name, list(self.projects))
        return name


def load_settings(**overrides: Any) -> Settings:
    """Build ``Settings``, letting non-``None`` *overrides* win over every file."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def configure_logging(level: str = "WARNING") -> None:
    """Route library logging to stderr through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
