# ScriptSync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from scriptsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from scriptsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from scriptsync.config.schema import (
    ApiConfig,
    CredentialsConfig,
    IoConfig,
    OutputConfig,
    ScriptSyncConfig,
    TranspilerConfig,
)

__all__ = [
    # Schema
    "ScriptSyncConfig",
    "CredentialsConfig",
    "ApiConfig",
    "TranspilerConfig",
    "IoConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
