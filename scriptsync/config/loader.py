# ScriptSync Configuration Loader
# Load, save, and validate the YAML configuration file

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from scriptsync.config.defaults import default_config_data, generate_default_config
from scriptsync.config.schema import ScriptSyncConfig
from scriptsync.errors import SettingsError
from scriptsync.utils.paths import ensure_dir

CONFIG_ENV = "SCRIPTSYNC_CONFIG"


def get_config_dir() -> Path:
    """Get the ScriptSync configuration directory."""
    return Path.home() / ".config" / "scriptsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def _format_errors(e: ValidationError) -> list[str]:
    return [f"{' -> '.join(str(l) for l in err['loc'])}: {err['msg']}" for err in e.errors()]


def load_config(config_path: Optional[Path] = None) -> ScriptSyncConfig:
    """
    Load configuration from YAML file.

    A missing file is not an error: the defaults are returned.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        ScriptSyncConfig: Validated configuration object.

    Raises:
        SettingsError: If the file is not valid YAML or fails validation.
    """
    if config_path is None:
        config_path = get_config_path()

    data: Any = None
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(f"Configuration must be a mapping: {config_path}")

    try:
        return ScriptSyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        raise SettingsError(f"Invalid configuration {config_path}: " + "; ".join(_format_errors(e))) from e


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    ensure_dir(config_path.parent)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return True, []
    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    unknown = sorted(set(data) - set(ScriptSyncConfig.model_fields))
    errors = [f"Unknown section: {name}" for name in unknown]

    try:
        ScriptSyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        errors.extend(_format_errors(e))

    return len(errors) == 0, errors


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = default_config_data()

    for section, values in data.items():
        if section in result and isinstance(result[section], dict) and isinstance(values, dict):
            result[section] = {**result[section], **values}
        else:
            result[section] = values

    return result
