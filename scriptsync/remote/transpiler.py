# ScriptSync Transpiler
# Runs an external command that converts TypeScript to server script source

import logging
import subprocess
from collections.abc import Sequence
from typing import Any, Optional

from scriptsync.config.schema import ScriptSyncConfig
from scriptsync.errors import TranspileError

logger = logging.getLogger(__name__)


class CommandTranspiler:
    """Pipes TypeScript source through a command and returns its stdout."""

    def __init__(self, command: Sequence[str], *, timeout: float = 60.0):
        if not command:
            raise ValueError("Transpiler command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ScriptSyncConfig) -> Optional["CommandTranspiler"]:
        """Build a transpiler from config, or None if no command is set."""
        if not config.transpiler.command:
            return None
        return cls(config.transpiler.command, timeout=config.transpiler.timeout)

    def transpile(self, source: str, options: Optional[dict[str, Any]] = None) -> str:
        """
        Transpile one source file.

        Args:
            source: TypeScript source.
            options: Optional context; "path" names the file in error messages.

        Returns:
            Transpiled source.

        Raises:
            TranspileError: If the command is missing, times out or fails.
        """
        path = (options or {}).get("path")
        logger.debug("Transpiling %s with %s", path or "<source>", " ".join(self.command))
        try:
            result = subprocess.run(
                self.command,
                input=source,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise TranspileError(f"Transpiler command not found: {self.command[0]}", path=path) from None
        except subprocess.TimeoutExpired:
            raise TranspileError(f"Transpiler timed out after {self.timeout:g}s", path=path) from None

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else ""
            target = f" {path}" if path else ""
            raise TranspileError(
                f"Transpiling{target} failed with exit code {result.returncode}",
                path=path,
                stderr=stderr,
            )
        return result.stdout
