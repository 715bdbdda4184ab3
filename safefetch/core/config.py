"""Configuration management for safefetch.

Settings are plain dictionaries passed explicitly to the fetch functions;
nothing here is cached at module level.
"""
from pathlib import Path
import yaml
from typing import Dict, Any, Optional

from .. import constants
from ..utils.exceptions import ConfigValidationError
from .platform import HostInfo
from .version import default_user_agent


def default_config_path(host: HostInfo) -> Path:
    """Location of the user config file, e.g. ~/.config/safefetch/config.yaml."""
    return host.home / ".config" / constants.CONFIG_DIR_NAME / constants.CONFIG_FILE_NAME


def validate_config(config: Dict[str, Any]) -> None:
    """Validate keys and value types of a settings dictionary.

    Raises:
        ConfigValidationError: On unknown keys or values of the wrong type
    """
    unknown = sorted(set(config) - set(constants.DEFAULT_CONFIG))
    if unknown:
        raise ConfigValidationError(f"Unknown config keys: {', '.join(unknown)}")

    for key, value in config.items():
        if key == "timeout" and value is None:
            continue
        expected = constants.CONFIG_TYPES[key]
        # bool is an int subclass; only accept it where a bool is expected
        if isinstance(value, bool) and bool not in expected:
            raise ConfigValidationError(f"Invalid value for '{key}': {value!r}")
        if not isinstance(value, expected):
            raise ConfigValidationError(f"Invalid value for '{key}': {value!r}")

    if config.get("chunk_size", 1) <= 0:
        raise ConfigValidationError("chunk_size must be positive")
    timeout = config.get("timeout")
    if timeout is not None and timeout <= 0:
        raise ConfigValidationError("timeout must be positive")


def resolve_settings(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge overrides over the defaults and validate the result.

    Args:
        overrides: Partial settings; None means defaults only

    Returns:
        Dict[str, Any]: Complete settings dictionary
    """
    settings = constants.DEFAULT_CONFIG.copy()
    if overrides:
        settings.update(overrides)
    validate_config(settings)
    if not settings["user_agent"]:
        settings["user_agent"] = default_user_agent()
    return settings


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load settings from a YAML file merged over the defaults.

    Args:
        path: Config file; a missing file or None yields the defaults

    Raises:
        ConfigValidationError: If the file is not valid YAML or has bad values
    """
    if path is None or not path.exists():
        return resolve_settings()

    try:
        with open(path, 'r') as f:
            user_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Failed to load config file {path}: {e}")
    except OSError as e:
        raise ConfigValidationError(f"Failed to read config file {path}: {e}")

    if not isinstance(user_config, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping")
    return resolve_settings(user_config)


def save_config(config: Dict[str, Any], path: Path) -> None:
    """Save settings to a YAML file.

    Args:
        config: Settings to save
        path: Destination file; parent directories are created

    Raises:
        ConfigValidationError: If the settings are invalid
        RuntimeError: If config cannot be saved
    """
    validate_config(config)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False)
    except (yaml.YAMLError, OSError) as e:
        raise RuntimeError(f"Failed to save config file {path}: {e}")
