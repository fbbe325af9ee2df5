"""
zvlib.config — Configuration singleton.

Provides thread-safe lazy loading of config.json and value lookups for the
backup location, file naming and AWS SDK transport settings.

Zero dependency on utils.py — uses only stdlib.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BACKUP_ROOT = "Route53Backups"
DEFAULT_FILE_PREFIX = "route53-zones"
BASE_DIR_ENV = "ZONEVAULT_BASE_DIR"

DEFAULT_CONFIG: Dict[str, Any] = {
    "__comment": "ZoneVault Configuration - Customize this file for your environment",
    "backup_root": DEFAULT_BACKUP_ROOT,
    "file_prefix": DEFAULT_FILE_PREFIX,
    "base_dir": None,
    "write_inventory": True,
    "aws_sdk_config": {
        "retries": {"max_attempts": 5, "mode": "adaptive"},
        "connect_timeout": 10,
        "read_timeout": 60,
    },
}

# ---------------------------------------------------------------------------
# Module-level state (config singleton)
# ---------------------------------------------------------------------------

CONFIG_DATA: Dict[str, Any] = {}
_CONFIG_LOADED: bool = False
_CONFIG_LOCK: threading.Lock = threading.Lock()


def _config_path() -> Path:
    """Return the absolute path to config.json (project root)."""
    # zvlib/config.py lives one level below the project root
    return Path(__file__).parent.parent / "config.json"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_config() -> Dict[str, Any]:
    """
    Load configuration from config.json, creating it with defaults if missing.

    Keys absent from the file fall back to DEFAULT_CONFIG, so an older
    config.json keeps working when new keys are introduced.

    Returns:
        dict: CONFIG_DATA
    """
    global CONFIG_DATA

    data: Dict[str, Any] = {}
    config_file = _config_path()

    try:
        if config_file.exists():
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            logger.debug("Configuration loaded from %s", config_file)
        else:
            logger.warning("config.json not found. Creating one with default settings.")
            try:
                with open(config_file, "w", encoding="utf-8") as f:
                    json.dump(DEFAULT_CONFIG, f, indent=2)
                logger.info("Created default config.json at %s", config_file)
            except OSError as e:
                logger.error("Failed to create default config.json: %s", e)
    except (OSError, ValueError) as e:
        logger.error("Error loading configuration: %s", e)

    merged = dict(DEFAULT_CONFIG)
    if isinstance(data, dict):
        merged.update(data)
    CONFIG_DATA = merged
    return CONFIG_DATA


def get_config() -> Dict[str, Any]:
    """
    Lazy-load configuration. First call loads from disk; subsequent calls return cached values.
    Thread-safe: uses _CONFIG_LOCK to prevent concurrent initialization.

    Returns:
        dict: CONFIG_DATA
    """
    global _CONFIG_LOADED, CONFIG_DATA
    with _CONFIG_LOCK:
        if not _CONFIG_LOADED:
            CONFIG_DATA = load_config()
            _CONFIG_LOADED = True
    return CONFIG_DATA


# ---------------------------------------------------------------------------
# Config value accessors
# ---------------------------------------------------------------------------


def config_value(key: str, default: Any = None, section: Optional[str] = None) -> Any:
    """
    Get a value from the configuration.

    Args:
        key: Configuration key
        default: Default value if key is not found
        section: Optional section in the configuration

    Returns:
        The configuration value or default
    """
    cfg = get_config()
    if not cfg:
        return default

    if section:
        block = cfg.get(section)
        if isinstance(block, dict) and key in block:
            return block[key]
    elif key in cfg:
        return cfg[key]

    return default


def get_base_dir() -> Path:
    """
    Resolve the directory that backup folders are created under.

    ZONEVAULT_BASE_DIR wins over the base_dir config key; with neither set
    the system temp directory is used.
    """
    override = os.environ.get(BASE_DIR_ENV, "").strip()
    if override:
        return Path(override)

    configured = config_value("base_dir")
    if configured:
        return Path(configured)

    return Path(tempfile.gettempdir())
