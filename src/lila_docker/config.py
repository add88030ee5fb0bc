"""
Configuration management for lila-docker

Two settings layers, both built on Pydantic settings:

- LilaDockerConfig: how the tool itself behaves (logging, paths, external
  binaries, wait policy), read from LILA_DOCKER_* environment variables.
- EnvironmentSettings: what the environment contains (repositories,
  directories, profiles, seeding), read from the settings file written by
  the setup wizard.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values, set_key
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ConfigurationError

logger = logging.getLogger(__name__)


def split_list(value: str) -> List[str]:
    """Split a comma-separated setting into its non-empty entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


class EnvironmentSettings(BaseSettings):
    """
    Environment descriptor loaded from the settings file.

    Values in the settings file take precedence over process environment
    variables, so a stale shell export never overrides what the wizard wrote.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    compose_profiles: str = Field(
        default="",
        description="Comma-separated active Docker Compose profiles",
    )
    repos: str = Field(
        default="lila,lila-ws",
        description="Comma-separated repositories, each 'name' or 'org/name'",
    )
    dirs: str = Field(
        default="",
        description="Comma-separated local directories to pre-create",
    )
    setup_database: bool = Field(
        default=False,
        description="Seed the database on first run",
    )
    su_password: str = Field(
        default="password",
        description="Password for the seeded admin user",
    )
    password: str = Field(
        default="password",
        description="Password for all other seeded users",
    )
    gitpod_workspace_id: Optional[str] = Field(
        default=None,
        description="Set when running inside a Gitpod workspace",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return init_settings, dotenv_settings, env_settings, file_secret_settings

    @validator("setup_database", pre=True)
    def validate_setup_database(cls, v):
        """Treat an empty value as false."""
        if isinstance(v, str) and not v.strip():
            return False
        return v

    @validator("gitpod_workspace_id")
    def validate_gitpod_workspace_id(cls, v: Optional[str]) -> Optional[str]:
        """Normalize an empty workspace id to None."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def repo_list(self) -> List[str]:
        return split_list(self.repos)

    @property
    def dir_list(self) -> List[str]:
        return split_list(self.dirs)

    @property
    def profile_list(self) -> List[str]:
        return split_list(self.compose_profiles)

    @property
    def is_gitpod(self) -> bool:
        return self.gitpod_workspace_id is not None


class LilaDockerConfig(BaseSettings):
    """
    Main configuration class for lila-docker.

    Configuration is loaded from:
    1. Environment variables (highest priority)
    2. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="LILA_DOCKER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for log files",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose console output",
    )

    # Project layout
    project_dir: str = Field(
        default=".",
        description="Directory holding docker-compose.yml and the settings file",
    )
    settings_file: str = Field(
        default=".env",
        description="Settings file, relative to the project directory",
    )
    repos_dir: str = Field(
        default="repos",
        description="Clone root, relative to the project directory",
    )

    # External tools
    docker_binary: str = Field(
        default="docker",
        description="Docker CLI used for 'docker compose'",
    )
    git_binary: str = Field(
        default="git",
        description="Git CLI",
    )
    workspace_url_binary: str = Field(
        default="gp",
        description="Cloud workspace helper resolving public port URLs",
    )

    # Cloning
    git_host: str = Field(
        default="https://github.com",
        description="Base URL repositories are cloned from",
    )
    default_org: str = Field(
        default="lichess-org",
        description="Organization used for repository entries without one",
    )
    git_remote_name: str = Field(
        default="upstream",
        description="Remote name given to cloned repositories",
    )
    clone_depth: int = Field(
        default=1,
        description="History depth of the shallow clones",
    )
    primary_repo: str = Field(
        default="lila",
        description="Repository whose submodules are initialized",
    )

    # Compose
    secondary_build_profile: str = Field(
        default="utils",
        description="Profile built in a second pass during first-time setup",
    )

    # Database readiness
    db_wait_max_attempts: int = Field(
        default=300,
        description="Liveness probes before giving up on the database",
    )
    db_wait_interval: float = Field(
        default=1.0,
        description="Seconds between liveness probes",
    )
    db_wait_backoff: float = Field(
        default=1.0,
        description="Multiplier applied to the interval after each failed probe",
    )
    db_wait_max_interval: float = Field(
        default=10.0,
        description="Upper bound for the probe interval",
    )

    @validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @validator("clone_depth", "db_wait_max_attempts")
    def validate_positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @validator("db_wait_interval", "db_wait_max_interval")
    def validate_positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @validator("db_wait_backoff")
    def validate_backoff(cls, v: float) -> float:
        if v < 1:
            raise ValueError("db_wait_backoff must be at least 1")
        return v

    @validator("docker_binary", "git_binary", "workspace_url_binary")
    def validate_binary(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("binary name must not be empty")
        return v.strip()

    @property
    def project_root(self) -> Path:
        return Path(self.project_dir)

    @property
    def settings_path(self) -> Path:
        return self.project_root / self.settings_file

    @property
    def repos_path(self) -> Path:
        return self.project_root / self.repos_dir

    def repo_path(self, name: str) -> Path:
        """Clone target for a repository name."""
        return self.repos_path / name

    def get_log_dir_path(self) -> Path:
        """Get log directory as Path object."""
        return Path(self.log_dir)

    def create_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        (self.get_log_dir_path() / "commands").mkdir(parents=True, exist_ok=True)


def load_config(overrides: Optional[dict] = None) -> LilaDockerConfig:
    """
    Load tool configuration with optional overrides.

    Args:
        overrides: Values taking precedence over the environment

    Returns:
        Loaded configuration
    """
    config = LilaDockerConfig()

    if overrides:
        config_data = config.model_dump()
        config_data.update(overrides)
        config = LilaDockerConfig(**config_data)

    config.create_directories()

    return config


def ensure_settings_file(path: Path) -> None:
    """Create an empty settings file if there is none."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)


def load_environment_settings(path: Path) -> EnvironmentSettings:
    """
    Load the environment descriptor from a settings file.

    A missing file yields the defaults (and whatever the process environment
    provides).
    """
    if path.exists():
        logger.debug(f"Loading environment settings from {path}")
        return EnvironmentSettings(_env_file=str(path))
    logger.debug(f"Settings file not found: {path}")
    return EnvironmentSettings(_env_file=None)


def read_settings_file(path: Path) -> Dict[str, str]:
    """Parse the settings file the same way EnvironmentSettings does."""
    if not path.exists():
        return {}
    return {key: value or "" for key, value in dotenv_values(path).items()}


def write_settings_file(path: Path, values: Dict[str, str]) -> None:
    """
    Set keys in the settings file.

    Other keys and comments already in the file are kept. Values that are
    not plain alphanumerics are quoted.
    """
    try:
        ensure_settings_file(path)
        for key, value in values.items():
            set_key(str(path), key, value, quote_mode="auto")
    except OSError as e:
        raise ConfigurationError(f"Failed to save settings to {path}: {e}") from e
    logger.info(f"Saved settings to {path}")
