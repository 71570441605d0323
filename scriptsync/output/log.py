# ScriptSync Logging
# Diagnostic logging setup for the CLI

import logging
from typing import Optional

from rich.console import Console as RichConsole
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging for a CLI invocation.

    Logs go to stderr through rich; DEBUG for scriptsync modules when
    verbose, WARNING otherwise. A log file, if given, always receives DEBUG.

    Args:
        verbose: Enable debug logging.
        log_file: Optional path of a log file.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=RichConsole(stderr=True),
            level=level,
            show_path=verbose,
            rich_tracebacks=True,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handlers.append(file_handler)

    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=handlers, force=True)
    logging.getLogger("scriptsync").setLevel(logging.DEBUG if (verbose or log_file) else logging.WARNING)
