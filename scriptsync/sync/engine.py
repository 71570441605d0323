# ScriptSync Sync Engine
# Plans pushes and pulls between the local tree and the remote file list

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol

from scriptsync.errors import (
    EmptyRemoteFileSet,
    ExtensionConflictError,
    PullWriteError,
    TranspileError,
    TranspilerUnavailableError,
)
from scriptsync.sync.classify import DEFAULT_EXTENSIONS, FileExtensions, classify, is_typescript
from scriptsync.sync.conflicts import find_conflicts
from scriptsync.sync.files import (
    FileType,
    LocalFile,
    LocalFileWrite,
    PullPlan,
    PushFile,
    PushPlan,
    RemoteFile,
)
from scriptsync.sync.ignore import IgnoreRuleSet
from scriptsync.sync.names import to_local_path, to_remote_name
from scriptsync.sync.order import order_push_files
from scriptsync.utils.paths import DEFAULT_MAX_WORKERS, read_text_files, to_posix, write_text_files

if TYPE_CHECKING:
    from scriptsync.project import ProjectContext, ProjectSettings


class Transpiler(Protocol):
    """Turns TypeScript source into server script source."""

    def transpile(self, source: str, options: Optional[dict[str, Any]] = None) -> str: ...


def walk_local_tree(
    local_root: Path,
    root_dir: str | None,
    ignore_rules: IgnoreRuleSet,
    *,
    extensions: FileExtensions = DEFAULT_EXTENSIONS,
    recursive: bool = True,
) -> list[LocalFile]:
    """
    Discover and classify every file under the content root.

    Args:
        local_root: Project directory.
        root_dir: Content root relative to local_root, or None.
        ignore_rules: Rules evaluated against content-root relative paths.
        extensions: Extension table for classification.
        recursive: Whether to descend into subdirectories.

    Returns:
        LocalFiles sorted by relative path.
    """
    content_dir = local_root / root_dir if root_dir else local_root
    if not content_dir.is_dir():
        return []

    files: list[LocalFile] = []
    for dirpath, dirnames, filenames in os.walk(content_dir):
        dirnames.sort()
        if not recursive:
            dirnames.clear()
        for filename in sorted(filenames):
            absolute = Path(dirpath) / filename
            relative_path = to_posix(os.path.relpath(absolute, local_root))
            root_path = to_posix(os.path.relpath(absolute, content_dir))
            files.append(
                LocalFile(
                    relative_path=relative_path,
                    is_ignored=ignore_rules.is_ignored(root_path),
                    api_type=classify(root_path, extensions),
                    root_path=root_path,
                    is_typescript=is_typescript(root_path, extensions),
                )
            )

    files.sort(key=lambda f: f.relative_path)
    return files


def plan_push(
    local_root: Path,
    root_dir: str | None,
    ignore_rules: IgnoreRuleSet,
    settings: ProjectSettings,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> PushPlan:
    """
    Plan an upload of the local tree.

    Walks the content root, filters ignored and unsupported files, fails on
    name conflicts, reads sources and orders files by the configured
    preference.

    Args:
        local_root: Project directory.
        root_dir: Content root relative to local_root, or None.
        ignore_rules: Ignore rules for this pass.
        settings: Project settings (extensions, push order, subdirectories).
        max_workers: Bound on concurrently read files.

    Returns:
        PushPlan with ordered files plus ignored and unsupported paths.

    Raises:
        ExtensionConflictError: If two files map to one remote name.
        LocalReadError: If a source file cannot be read as UTF-8 text.
    """
    root_dir = to_posix(root_dir or "") or None
    files = walk_local_tree(
        local_root,
        root_dir,
        ignore_rules,
        extensions=settings.extensions,
        recursive=not settings.ignore_subdirectories,
    )
    return build_push_plan(
        files,
        local_root,
        root_dir,
        push_order=settings.file_push_order,
        max_workers=max_workers,
    )


def build_push_plan(
    files: Sequence[LocalFile],
    local_root: Path,
    root_dir: str | None,
    *,
    push_order: Sequence[str] | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> PushPlan:
    """Turn walked files into an ordered push plan."""
    conflicts = find_conflicts(files, root_dir)
    if conflicts:
        raise ExtensionConflictError(conflicts)

    unsupported = [f.relative_path for f in files if not f.is_supported]
    ignored = [f.relative_path for f in files if f.is_ignored and f.is_supported]
    candidates = [f for f in files if f.is_candidate]

    sources = read_text_files(local_root, [f.relative_path for f in candidates], max_workers=max_workers)

    push_files = [
        PushFile(
            local_path=f.relative_path,
            remote=RemoteFile(
                name=to_remote_name(f.relative_path, root_dir),
                type=f.api_type,  # type: ignore[arg-type]
                source=sources[f.relative_path],
            ),
            is_typescript=f.is_typescript,
        )
        for f in candidates
    ]

    return PushPlan(
        files=order_push_files(push_files, push_order),
        ignored=ignored,
        unsupported=unsupported,
    )


def plan_pull(
    remote_files: Sequence[RemoteFile],
    root_dir: str | None = None,
    file_extension: str | None = None,
    *,
    json_extension: str | None = None,
    script_id: str | None = None,
) -> PullPlan:
    """
    Plan materialising remote files locally.

    Files with empty source are dropped so no empty files are created.

    Raises:
        EmptyRemoteFileSet: If the remote project has no files.
        UnsafeRemoteName: If a remote name maps outside the content root.
    """
    if not remote_files:
        raise EmptyRemoteFileSet(script_id)

    root_dir = to_posix(root_dir or "") or None
    plan = PullPlan()
    for remote in remote_files:
        path = to_local_path(remote.name, remote.type, root_dir, file_extension, json_extension)
        if not remote.source:
            plan.skipped_empty.append(path)
            continue
        plan.writes.append(
            LocalFileWrite(path=path, source=remote.source, remote_name=remote.name, type=FileType(remote.type))
        )

    plan.writes.sort(key=lambda w: w.path)
    plan.skipped_empty.sort()
    return plan


def changed_files(plan: PushPlan, remote_files: Iterable[RemoteFile]) -> list[PushFile]:
    """Planned files that are new remotely or whose source differs."""
    remote_by_name = {f.name: f for f in remote_files}
    changed = []
    for file in plan.files:
        remote = remote_by_name.get(file.name)
        if remote is None or remote.type != file.remote.type or remote.source != file.remote.source:
            changed.append(file)
    return changed


def removed_remote_files(plan: PushPlan, remote_files: Iterable[RemoteFile]) -> list[RemoteFile]:
    """Remote files a push would drop because no local file maps to them."""
    local_names = {f.name for f in plan.files}
    return sorted((f for f in remote_files if f.name not in local_names), key=lambda f: f.name)


def collapse_untracked(all_paths: Iterable[str], tracked_paths: Iterable[str]) -> list[str]:
    """
    List untracked paths, collapsed to their highest untracked directory.

    A directory that contains no tracked file is reported once, as
    `dir/`, instead of listing every file below it.
    """
    tracked = set(tracked_paths)
    tracked_dirs: set[str] = set()
    for path in tracked:
        parent = posixpath.dirname(path)
        while parent and parent not in tracked_dirs:
            tracked_dirs.add(parent)
            parent = posixpath.dirname(parent)

    entries: set[str] = set()
    for path in all_paths:
        if path in tracked:
            continue
        display = path
        parent = posixpath.dirname(path)
        while parent and not parent.endswith("..") and parent not in tracked_dirs:
            display = f"{parent}/"
            parent = posixpath.dirname(parent)
        entries.add(display)

    return sorted(entries)


def transpile_plan(plan: PushPlan, transpiler: Optional[Transpiler]) -> PushPlan:
    """
    Transpile the TypeScript files of a plan.

    Raises:
        TranspilerUnavailableError: If TypeScript files exist and transpiler is None.
        TranspileError: If a file fails to transpile.
    """
    pending = plan.typescript_files
    if not pending:
        return plan
    if transpiler is None:
        raise TranspilerUnavailableError([f.local_path for f in pending])

    files: list[PushFile] = []
    for file in plan.files:
        if not file.is_typescript:
            files.append(file)
            continue
        try:
            source = transpiler.transpile(file.remote.source, {"path": file.local_path})
        except TranspileError as e:
            if e.path is None:
                e.path = file.local_path
            raise
        files.append(replace(file.with_source(source), is_typescript=False))

    return replace(plan, files=files)


def write_pull_plan(plan: PullPlan, local_root: Path, *, max_workers: int = DEFAULT_MAX_WORKERS) -> list[str]:
    """
    Write every file of a pull plan below local_root.

    Returns:
        Written paths, sorted.

    Raises:
        PullWriteError: If any write failed; all writes are still attempted.
    """
    written, failures = write_text_files(
        local_root,
        ((w.path, w.source) for w in plan.writes),
        max_workers=max_workers,
    )
    if failures:
        raise PullWriteError(failures)
    return written


class SyncEngine:
    """
    Plans synchronization for one project.

    An engine is built per command invocation from a ProjectContext and
    keeps no state between plans.
    """

    def __init__(self, context: ProjectContext, *, max_workers: int = DEFAULT_MAX_WORKERS):
        """
        Initialize sync engine.

        Args:
            context: Project context (settings, ignore rules, directories).
            max_workers: Bound on concurrent file reads and writes.
        """
        self.context = context
        self.max_workers = max_workers

    @property
    def settings(self) -> ProjectSettings:
        return self.context.settings

    @property
    def root_dir(self) -> str | None:
        return self.context.root_dir or None

    def walk(self) -> list[LocalFile]:
        """Discover and classify local files."""
        return walk_local_tree(
            self.context.project_dir,
            self.root_dir,
            self.context.ignore_rules,
            extensions=self.settings.extensions,
            recursive=not self.settings.ignore_subdirectories,
        )

    def plan_push(self, files: Optional[Sequence[LocalFile]] = None) -> PushPlan:
        """Plan an upload of the local project, optionally from already walked files."""
        return build_push_plan(
            self.walk() if files is None else files,
            self.context.project_dir,
            self.root_dir,
            push_order=self.settings.file_push_order,
            max_workers=self.max_workers,
        )

    def plan_pull(self, remote_files: Sequence[RemoteFile]) -> PullPlan:
        """Plan writing fetched remote files into the content root."""
        return plan_pull(
            remote_files,
            self.root_dir,
            self.settings.pull_extension,
            json_extension=self.settings.pull_json_extension,
            script_id=self.settings.script_id,
        )

    def write(self, plan: PullPlan) -> list[str]:
        """Write a pull plan to disk."""
        return write_pull_plan(plan, self.context.project_dir, max_workers=self.max_workers)

    def transpile(self, plan: PushPlan, transpiler: Optional[Transpiler]) -> PushPlan:
        """Transpile TypeScript sources of a push plan."""
        return transpile_plan(plan, transpiler)

    def changed_files(self, plan: PushPlan, remote_files: Iterable[RemoteFile]) -> list[PushFile]:
        return changed_files(plan, remote_files)

    def removed_remote_files(self, plan: PushPlan, remote_files: Iterable[RemoteFile]) -> list[RemoteFile]:
        return removed_remote_files(plan, remote_files)

    def untracked_files(self, files: Optional[Sequence[LocalFile]] = None) -> list[str]:
        """Local files a push would leave out, collapsed by directory."""
        files = self.walk() if files is None else files
        tracked = [f.relative_path for f in files if f.is_candidate]
        return collapse_untracked((f.relative_path for f in files), tracked)
