from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("nistview.config.yaml")

DEFAULT_CATALOG_SETTINGS: Dict[str, Any] = {
    "base_url": "https://csrc.nist.gov/api/csrc/v1",
    "endpoints": [
        "/controls/sp800-53/r5",
        "/controls",
        "/publications/800-53/rev-5/controls",
    ],
    "timeout_seconds": 30,
    "user_agent": "nistview/0.1",
    "fallback_path": None,
}

DEFAULT_EXPORT_SETTINGS: Dict[str, Any] = {
    "out_dir": "exports",
}

DEFAULT_LOGGING_SETTINGS: Dict[str, Any] = {
    "level": "INFO",
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load nistview configuration from YAML file.

    Args:
        path: Optional path to the config file. Defaults to nistview.config.yaml

    Returns:
        Dictionary with configuration (empty when the default file is absent)

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValueError: If config structure is invalid
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug(f"No {DEFAULT_CONFIG_PATH} found, using built-in defaults")
            return {}
        cfg_path = DEFAULT_CONFIG_PATH
    else:
        cfg_path = path
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    _validate_config(config)
    return config


def _validate_config(config: Any) -> None:
    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    if "version" not in config:
        raise ValueError("Config must have 'version' field")

    for section in ("catalog", "export", "logging"):
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config '{section}' must be a dictionary if provided")

    catalog = config.get("catalog")
    if catalog is None:
        return

    endpoints = catalog.get("endpoints")
    if endpoints is not None:
        if not isinstance(endpoints, list) or not all(isinstance(e, str) for e in endpoints):
            raise ValueError("Config 'catalog.endpoints' must be a list of strings")

    timeout = catalog.get("timeout_seconds")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValueError("Config 'catalog.timeout_seconds' must be a positive number")


def _merge_section(config: Dict[str, Any] | None, section: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a config section on built-in defaults, ignoring explicit nulls."""
    user_section = (config or {}).get(section) or {}
    merged = deepcopy(defaults)
    for key, value in user_section.items():
        if value is not None:
            merged[key] = value
    return merged


def get_catalog_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve catalog fetch settings with built-in fallbacks.

    Defaults:
    - base_url: NIST CSRC API v1
    - endpoints: SP 800-53 Rev. 5 control endpoints, tried in order
    - timeout_seconds: 30
    """
    settings = _merge_section(config, "catalog", DEFAULT_CATALOG_SETTINGS)
    settings["base_url"] = str(settings["base_url"]).rstrip("/")
    settings["endpoints"] = list(settings["endpoints"])
    return settings


def get_export_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return _merge_section(config, "export", DEFAULT_EXPORT_SETTINGS)


def get_logging_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return _merge_section(config, "logging", DEFAULT_LOGGING_SETTINGS)
