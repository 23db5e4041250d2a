"""
Server Configuration - Configuration loading and validation.

This module provides the ServerConfig model and the load_config() helper.
Configuration is assembled exactly once at start-up from an optional YAML
file and the process environment, and is immutable afterwards.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError


class ConfigError(Exception):
    """Raised when there's a configuration error."""

    pass


# Environment variable -> ServerConfig field
ENV_OVERRIDES = {
    "GITHUB_TOKEN": "github_token",
    "GITHUB_API_URL": "github_api_url",
    "GITHUB_DEFAULT_OWNER": "default_owner",
    "GITHUB_DEFAULT_REPO": "default_repo",
    "ADB_PATH": "adb_path",
}


class ServerConfig(BaseModel):
    """Complete server configuration schema."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    github_token: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    default_owner: str = "aas-aosp-dev"
    default_repo: str = "AOSPBugreportAnalyzer"
    user_agent: str = "AOSPBugreportAnalyzerMCPServer"
    http_timeout: Optional[float] = None
    adb_path: str = "adb"
    summaries_dir: Path = Path("summaries")
    bugreports_dir: Path = Path("bugreports")

    @property
    def has_token(self) -> bool:
        return bool(self.github_token)

    def summaries_path(self) -> Path:
        """Absolute summaries directory, resolved against the current cwd."""
        return Path(self.summaries_dir).expanduser().resolve()

    def bugreports_path(self) -> Path:
        """Absolute bugreports directory, resolved against the current cwd."""
        return Path(self.bugreports_dir).expanduser().resolve()


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ServerConfig:
    """
    Build the server configuration.

    Args:
        path: Optional YAML file with ServerConfig fields at the top level.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        A frozen ServerConfig.

    Raises:
        ConfigError: If the file can't be read or the values are invalid.
    """
    environ = os.environ if environ is None else environ

    data = _load_yaml(path)

    for env_var, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_var)
        if value:
            data[field_name] = value

    # An empty token is the same as no token
    if not data.get("github_token"):
        data["github_token"] = None

    try:
        return ServerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def _load_yaml(path: Optional[Path]) -> Dict[str, Any]:
    """Load YAML file if one was given."""
    if path is None:
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return dict(data)
