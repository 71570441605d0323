# ScriptSync Name Mapping
# Converts between local relative paths and remote file names

import posixpath
from pathlib import PurePosixPath

from scriptsync.errors import UnsafeRemoteName
from scriptsync.sync.classify import is_manifest_path
from scriptsync.sync.files import MANIFEST_NAME, FileType
from scriptsync.utils.paths import split_extension, to_posix

DEFAULT_SCRIPT_EXTENSION = "js"

_TYPE_EXTENSIONS = {
    FileType.HTML: "html",
    FileType.JSON: "json",
}


def relative_to_root(local_path: str, root_dir: str | None = None) -> str:
    """
    Make a project relative path relative to the content root.

    Args:
        local_path: Path relative to the project directory.
        root_dir: Content root relative to the project directory, or None.

    Returns:
        Posix path relative to root_dir.

    Raises:
        ValueError: If the path is not inside root_dir.
    """
    path = to_posix(local_path)
    root = to_posix(root_dir or "")
    if not root:
        return path
    try:
        return PurePosixPath(path).relative_to(root).as_posix()
    except ValueError:
        raise ValueError(f"{local_path} is not inside root directory {root_dir}") from None


def to_remote_name(local_path: str, root_dir: str | None = None) -> str:
    """
    Compute the remote file name for a local file.

    Strips the extension, makes the path relative to root_dir and uses "/"
    as separator. `rootDir/foo/Code.js` becomes `foo/Code`.
    """
    root_path = relative_to_root(local_path, root_dir)
    if is_manifest_path(root_path):
        return MANIFEST_NAME
    stem, _ = split_extension(root_path)
    return stem


def extension_for(
    remote_type: FileType,
    file_extension: str | None = None,
    json_extension: str | None = None,
) -> str:
    """Local extension (without dot) used for a remote file type."""
    if remote_type == FileType.SERVER_JS:
        ext = (file_extension or DEFAULT_SCRIPT_EXTENSION).strip().lstrip(".")
        return ext or DEFAULT_SCRIPT_EXTENSION
    if remote_type == FileType.JSON and json_extension:
        return json_extension.strip().lstrip(".") or _TYPE_EXTENSIONS[remote_type]
    return _TYPE_EXTENSIONS[remote_type]


def to_local_path(
    remote_name: str,
    remote_type: FileType,
    root_dir: str | None = None,
    file_extension: str | None = None,
    json_extension: str | None = None,
) -> str:
    """
    Compute the local path for a remote file.

    Args:
        remote_name: Extensionless remote name, e.g. "lib/Util".
        remote_type: Remote file type.
        root_dir: Content root relative to the project directory.
        file_extension: Extension for script files, with or without dot.
        json_extension: Extension for the manifest, with or without dot.

    Returns:
        Posix path relative to the project directory.

    Raises:
        UnsafeRemoteName: If the name is absolute or climbs out of root_dir.
    """
    raw = remote_name.replace("\\", "/")
    name = to_posix(remote_name)
    if raw.startswith("/") or not name or posixpath.normpath(name).split("/")[0] in ("..", "."):
        raise UnsafeRemoteName(remote_name)
    filename = f"{name}.{extension_for(FileType(remote_type), file_extension, json_extension)}"
    root = to_posix(root_dir or "")
    return f"{root}/{filename}" if root else filename
