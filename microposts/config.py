"""
Configuration for microposts.

Config file: ~/.microposts/config.json (directory overridable with
MICROPOSTS_DATA_DIR). Environment variables win over the file:
- MICROPOSTS_DATABASE_URL -> database_url
- MICROPOSTS_LOG_LEVEL -> log_level
"""
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".microposts"
CONFIG_FILE_NAME = "config.json"
DB_FILE_NAME = "microposts.db"

_DEFAULTS = {
    "database_url": None,  # Resolved to a SQLite file in the data dir
    "log_level": "WARNING",
    "list_limit": 20,
}


@dataclass
class MicropostsConfig:
    """Microposts configuration."""
    database_url: str
    log_level: str = "WARNING"
    list_limit: int = 20


def get_data_dir() -> Path:
    """Get the data directory."""
    return Path(os.environ.get("MICROPOSTS_DATA_DIR", DEFAULT_DATA_DIR)).expanduser()


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_data_dir() / CONFIG_FILE_NAME


def _load_json_file(path: Path) -> dict:
    """Load a JSON object from a file, return empty dict if missing or invalid."""
    try:
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring %s: top-level value is not an object", path)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config from %s: %s", path, e)
    return {}


def _default_database_url() -> str:
    return f"sqlite:///{get_data_dir() / DB_FILE_NAME}"


def load_config() -> MicropostsConfig:
    """
    Load configuration.

    Merges defaults with config file values, then applies environment
    overrides.
    """
    data = _load_json_file(get_config_path())
    merged = {**_DEFAULTS, **data}

    database_url = os.environ.get("MICROPOSTS_DATABASE_URL") or merged.get("database_url")
    if not database_url:
        database_url = _default_database_url()

    log_level = os.environ.get("MICROPOSTS_LOG_LEVEL") or merged.get("log_level")

    try:
        list_limit = int(merged.get("list_limit", _DEFAULTS["list_limit"]))
    except (TypeError, ValueError):
        logger.warning("Invalid list_limit %r, using default", merged.get("list_limit"))
        list_limit = _DEFAULTS["list_limit"]

    return MicropostsConfig(
        database_url=database_url,
        log_level=str(log_level or _DEFAULTS["log_level"]).upper(),
        list_limit=list_limit,
    )
