# ScriptSync Output Module
# Rich console output and logging setup

from scriptsync.output.console import Console, create_console
from scriptsync.output.log import setup_logging

__all__ = [
    "Console",
    "create_console",
    "setup_logging",
]
