# ScriptSync Manifest Guard
# Detects manifest changes before a push overwrites the remote copy

from collections.abc import Iterable

from scriptsync.errors import MissingRemoteManifest
from scriptsync.sync.files import MANIFEST_NAME, PushFile, RemoteFile


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def find_manifest(files: Iterable[RemoteFile]) -> RemoteFile | None:
    """Return the manifest among remote files, if any."""
    for file in files:
        if file.is_manifest:
            return file
    return None


def local_manifest(files: Iterable[PushFile]) -> PushFile | None:
    """Return the manifest among planned push files, if any."""
    for file in files:
        if file.remote.is_manifest:
            return file
    return None


def has_manifest_changed(local_manifest_source: str, remote_files: Iterable[RemoteFile]) -> bool:
    """
    Check whether the local manifest differs from the remote one.

    Args:
        local_manifest_source: Content of the local manifest file.
        remote_files: Files fetched from the remote project.

    Returns:
        True if the content differs after line ending normalisation.

    Raises:
        MissingRemoteManifest: If the remote project has no manifest.
    """
    remote = find_manifest(remote_files)
    if remote is None:
        raise MissingRemoteManifest(MANIFEST_NAME)
    return normalize_line_endings(local_manifest_source) != normalize_line_endings(remote.source)
