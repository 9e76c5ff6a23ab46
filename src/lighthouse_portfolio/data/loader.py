"""Settings loader: packaged YAML defaults, optional user YAML, environment overrides."""

import logging
import os
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LIGHTHOUSE_CONFIG"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "LIGHTHOUSE_BASE_URL": "base_url",
    "LIGHTHOUSE_SESSION_FILE": "session_file",
    "LIGHTHOUSE_TIMEOUT": "timeout",
    "LIGHTHOUSE_MAX_RETRIES": "max_retries",
    "LIGHTHOUSE_LOG_LEVEL": "log_level",
}

# (section, key) in the YAML layout -> settings field
YAML_FIELDS = {
    ("api", "base_url"): "base_url",
    ("api", "timeout"): "timeout",
    ("api", "max_retries"): "max_retries",
    ("session", "file"): "session_file",
    ("analytics", "major_holding_threshold"): "major_holding_threshold",
    ("analytics", "top_movers"): "top_movers",
    ("analytics", "default_performance_days"): "default_performance_days",
    ("analytics", "max_workers"): "max_workers",
    ("logging", "level"): "log_level",
}


class Settings(BaseModel):
    """
    Runtime settings.

    Attributes
    ----------
    base_url : str
        Lighthouse API base URL
    timeout : float
        HTTP timeout in seconds
    max_retries : int
        Retries for transport failures
    session_file : Path
        Where the session cookie is stored
    major_holding_threshold : Decimal
        Minimum USD value of a major holding
    top_movers : int
        Number of gainers and losers reported
    default_performance_days : int
        Performance window length when no start date is given
    max_workers : int
        Concurrent portfolio fetches for the all-portfolios overview
    log_level : str
        Logging level name

    """

    base_url: str = "https://lighthouse.one/v1"
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    session_file: Path = Path("~/.lighthouse_session")
    major_holding_threshold: Decimal = Field(default=Decimal("1000"), ge=0)
    top_movers: int = Field(default=5, ge=0)
    default_performance_days: int = Field(default=30, ge=1)
    max_workers: int = Field(default=4, ge=1)
    log_level: str = "WARNING"


def load_yaml(path: str | Path) -> dict[str, Any]:
    """
    Read a settings YAML file.

    Parameters
    ----------
    path : str | Path
        YAML file location

    Returns
    -------
    dict[str, Any]
        Parsed document (empty for an empty file)

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist

    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_defaults() -> dict[str, Any]:
    """Load the packaged ``defaults.yaml``."""
    return load_yaml(Path(__file__).parent / "defaults.yaml")


def flatten(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Map the sectioned YAML layout onto flat settings field names."""
    values: dict[str, Any] = {}
    for (section, key), field_name in YAML_FIELDS.items():
        section_values = raw.get(section) or {}
        if key in section_values:
            values[field_name] = section_values[key]
    return values


def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Build settings from defaults, an optional YAML file, and the environment.

    Later sources win: packaged defaults, then ``config_path`` (or the file
    named by ``LIGHTHOUSE_CONFIG``), then ``LIGHTHOUSE_*`` variables.

    Parameters
    ----------
    config_path : str | Path | None
        User settings file
    environ : Mapping[str, str] | None
        Environment to read (defaults to ``os.environ``)

    Returns
    -------
    Settings
        Validated settings

    Raises
    ------
    FileNotFoundError
        If the user settings file does not exist
    pydantic.ValidationError
        If a value is invalid

    """
    if environ is None:
        environ = os.environ

    values = flatten(load_defaults())

    config_path = config_path or environ.get(CONFIG_ENV_VAR)
    if config_path:
        values.update(flatten(load_yaml(config_path)))
        logger.debug("Loaded settings from %s", config_path)

    for env_var, field_name in ENV_OVERRIDES.items():
        if environ.get(env_var):
            values[field_name] = environ[env_var]

    return Settings.model_validate(values)
