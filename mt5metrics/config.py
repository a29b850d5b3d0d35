"""Configuration loading for MT5Metrics.

Settings live in ``~/.config/mt5metrics/config.toml``:

    [storage]
    logs_url = "https://<project>.supabase.co/storage/v1/object/public/logs"

    [fetch]
    timeout = 10.0
    max_workers = 4

    [database]
    path = "~/.config/mt5metrics/mt5metrics.db"
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 4


def config_dir() -> Path:
    """Directory holding the config file and default database."""
    return Path.home() / ".config" / "mt5metrics"


def get_config() -> dict:
    """Lazily load configuration.

    Returns:
        Parsed config, or an empty dict when the file is missing or invalid.
    """
    import toml

    config_path = config_dir() / "config.toml"

    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except toml.TomlDecodeError as e:
        logger.warning("Ignoring invalid config %s: %s", config_path, e)
        return {}


def get_db_path(config: dict) -> Path:
    """Resolve the SQLite database path."""
    path = config.get("database", {}).get("path")
    if path:
        return Path(path).expanduser()
    return config_dir() / "mt5metrics.db"


def get_logs_url(config: dict) -> Optional[str]:
    """Base URL of the per-account trade logs, if configured."""
    return config.get("storage", {}).get("logs_url") or None


def get_fetch_settings(config: dict) -> tuple[float, int]:
    """Return (timeout, max_workers) for remote log fetching."""
    fetch = config.get("fetch", {})
    timeout = float(fetch.get("timeout", DEFAULT_TIMEOUT))
    max_workers = int(fetch.get("max_workers", DEFAULT_MAX_WORKERS))
    return timeout, max(1, max_workers)
