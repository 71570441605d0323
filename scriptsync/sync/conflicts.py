# ScriptSync Conflict Detection
# Finds local files that would overwrite each other remotely

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from scriptsync.sync.files import LocalFile
from scriptsync.sync.names import to_remote_name


@dataclass(frozen=True)
class ExtensionConflict:
    """Several local files that map to one remote name."""

    remote_name: str
    paths: tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.remote_name}: {', '.join(self.paths)}"


def find_conflicts(files: Iterable[LocalFile], root_dir: str | None = None) -> list[ExtensionConflict]:
    """
    Scan candidate files for remote name collisions.

    Ignored and unsupported files are skipped. Each colliding name is
    reported once, with every path that maps to it.

    Args:
        files: Files from the local tree walk.
        root_dir: Content root relative to the project directory.

    Returns:
        Conflicts sorted by remote name; empty if there are none.
    """
    by_name: dict[str, list[str]] = defaultdict(list)
    for file in files:
        if not file.is_candidate:
            continue
        by_name[to_remote_name(file.relative_path, root_dir)].append(file.relative_path)

    return [
        ExtensionConflict(remote_name=name, paths=tuple(sorted(paths)))
        for name, paths in sorted(by_name.items())
        if len(paths) > 1
    ]
