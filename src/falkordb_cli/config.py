import os
from pathlib import Path
from typing import Any, Literal, Optional, Union
from urllib.parse import quote

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import OutputFormat
from .domain.services import ConnectionSetupFailed

CONFIG_ENV_VAR = "FALKORDB_CLI_CONFIG"
DEFAULT_CONFIG_FILE = ".falkordb-cli.yaml"


class ConnectionSettings(BaseSettings):
    """Connection details for the FalkorDB server."""

    hostname: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    database: int = Field(default=0, ge=0, le=255)
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="FALKORDB_", env_file=".env", extra="ignore"
    )

    def url(self) -> str:
        """redis:// URL understood by ``FalkorDB.from_url``."""
        credentials = ""
        if self.username or self.password:
            credentials = quote(self.username or "", safe="")
            if self.password:
                credentials += ":" + quote(self.password, safe="")
            credentials += "@"
        return f"redis://{credentials}{self.hostname}:{self.port}/{self.database}"

    def masked_url(self) -> str:
        """URL safe for logging: the password is replaced by ***."""
        if not self.password:
            return self.url()
        return self.model_copy(update={"password": "***"}).url()


class OutputSettings(BaseModel):
    format: OutputFormat = OutputFormat.TABLE
    quiet: bool = False
    raw: bool = False


class LoggingSettings(BaseModel):
    level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE"] = "WARNING"
    format: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )


class CliSettings(BaseSettings):
    """Central settings loaded from an optional YAML file and the environment."""

    connection: ConnectionSettings = Field(
        default_factory=ConnectionSettings,
        description="FalkorDB connection options",
    )
    output: OutputSettings = Field(
        default_factory=OutputSettings,
        description="Result rendering options",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Diagnostic logging options",
    )
    history_file: Optional[Path] = Field(
        default=None,
        description="REPL history file (defaults to ~/.falkordb-cli_history)",
    )

    model_config = SettingsConfigDict(
        env_prefix="FALKORDB_CLI_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


def default_config_path() -> Path:
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit)
    return Path.home() / DEFAULT_CONFIG_FILE


def load_settings(config_path: Optional[Union[str, Path]] = None) -> CliSettings:
    """
    Load CLI settings from a YAML file and environment variables.

    The YAML file (``config_path``, ``$FALKORDB_CLI_CONFIG`` or
    ``~/.falkordb-cli.yaml``) is optional unless given explicitly. Values found
    in the file take precedence over environment variables and `.env`.

    Raises:
        ConnectionSetupFailed: if the file is unreadable or the values are invalid.
    """
    path = Path(config_path) if config_path else default_config_path()
    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path) as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConnectionSetupFailed(f"Cannot read settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConnectionSetupFailed(f"Settings file {path} must contain a mapping")
    elif config_path:
        raise ConnectionSetupFailed(f"Settings file {path} does not exist")

    try:
        return CliSettings(**data)
    except ValidationError as exc:
        raise ConnectionSetupFailed(f"Invalid settings: {exc}") from exc


def apply_overrides(settings: CliSettings, **overrides: Any) -> CliSettings:
    """
    Return a copy of ``settings`` with command line values applied.

    Keys are ``hostname``, ``port``, ``database``, ``username``, ``password``,
    ``format``, ``quiet``, ``raw`` and ``log_level``; None leaves a value as is.
    """
    connection = settings.connection.model_dump()
    output = settings.output.model_dump()
    logging_ = settings.logging.model_dump()

    for key in ("hostname", "port", "database", "username", "password"):
        if overrides.get(key) is not None:
            connection[key] = overrides[key]
    if overrides.get("format") is not None:
        output["format"] = overrides["format"]
    for key in ("quiet", "raw"):
        if overrides.get(key):
            output[key] = True
    if overrides.get("log_level") is not None:
        logging_["level"] = str(overrides["log_level"]).upper()

    try:
        return CliSettings(
            connection=ConnectionSettings(**connection),
            output=OutputSettings(**output),
            logging=LoggingSettings(**logging_),
            history_file=settings.history_file,
        )
    except ValidationError as exc:
        raise ConnectionSetupFailed(f"Invalid connection parameters: {exc}") from exc
