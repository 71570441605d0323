# ScriptSync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "credentials": {
        "token_env": "SCRIPTSYNC_ACCESS_TOKEN",
        "path": "~/.clasprc.json",
    },
    "api": {
        "base_url": "https://script.googleapis.com/v1",
        "timeout": 30.0,
    },
    "transpiler": {
        # Command that reads TypeScript on stdin and writes script source to stdout
        "command": None,
        "timeout": 60.0,
    },
    "io": {
        "max_workers": 5,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_file": None,
    },
}


def default_config_data() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# ScriptSync Configuration
#
# credentials: where the access token is read from. The environment variable
#              wins over the credentials file.
# api:         remote script API endpoint and request timeout (seconds).
# transpiler:  command used to turn .ts files into server scripts before a push,
#              e.g. ["npx", "--yes", "ts2gas-cli"]. Leave empty to reject .ts files.
# io:          number of files read or written concurrently (1-16).
# output:      console and log file settings.

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
