# ScriptSync Errors
# Typed error taxonomy shared by the engine, the remote layer and the CLI

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scriptsync.sync.conflicts import ExtensionConflict


class ScriptSyncError(Exception):
    """Base class for all ScriptSync errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ExtensionConflictError(ScriptSyncError):
    """Two or more local files map to the same remote file name."""

    def __init__(self, conflicts: list[ExtensionConflict]):
        self.conflicts = list(conflicts)
        lines = [f"  {c.remote_name}: {', '.join(c.paths)}" for c in self.conflicts]
        super().__init__(
            "Conflicting file names. These files would overwrite each other in the remote project:\n"
            + "\n".join(lines)
        )


class MissingRemoteManifest(ScriptSyncError):
    """The remote project has no manifest file."""

    def __init__(self, manifest_name: str = "appsscript"):
        self.manifest_name = manifest_name
        super().__init__(f"Remote project has no manifest file ({manifest_name}.json)")


class EmptyRemoteFileSet(ScriptSyncError):
    """The remote project returned zero files."""

    def __init__(self, script_id: str | None = None):
        self.script_id = script_id
        target = f" {script_id}" if script_id else ""
        super().__init__(f"Remote project{target} contains no files")


class ProjectNotFoundError(ScriptSyncError):
    """No project settings file could be located."""


class SettingsError(ScriptSyncError):
    """Project settings file is unreadable or invalid."""


class TranspileError(ScriptSyncError):
    """TypeScript transpilation failed."""

    def __init__(self, message: str, path: str | None = None, stderr: str = ""):
        self.path = path
        self.stderr = stderr
        super().__init__(message)


class TranspilerUnavailableError(TranspileError):
    """TypeScript files are present but no transpiler is configured."""

    def __init__(self, paths: list[str]):
        self.paths = list(paths)
        super().__init__(
            "No transpiler configured for TypeScript files: " + ", ".join(self.paths)
            + "\nSet 'transpiler.command' in the scriptsync config."
        )


class UnsafeRemoteName(ScriptSyncError):
    """A remote file name would map to a path outside the content root."""

    def __init__(self, remote_name: str):
        self.remote_name = remote_name
        super().__init__(f'Remote file name "{remote_name}" points outside the project content root')


class LocalReadError(ScriptSyncError):
    """A local source file could not be read as UTF-8 text."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")


class PullWriteError(ScriptSyncError):
    """One or more pulled files could not be written."""

    def __init__(self, failures: dict[str, str]):
        self.failures = dict(failures)
        details = "\n".join(f"  {path}: {reason}" for path, reason in sorted(self.failures.items()))
        super().__init__(f"Failed to write {len(self.failures)} file(s):\n{details}")


class RemoteStoreError(ScriptSyncError):
    """Error talking to the remote project store."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NotAuthenticatedError(RemoteStoreError):
    """No usable credentials, or the remote service rejected them."""


class ScriptNotFoundError(RemoteStoreError):
    """The script id does not exist or is not accessible."""


class PushSyntaxError(RemoteStoreError):
    """The remote service rejected a push because of a script syntax error."""

    def __init__(self, message: str, file_name: str, line: int, snippet: str = ""):
        self.file_name = file_name
        self.line = line
        self.snippet = snippet
        super().__init__(message, status_code=400)
