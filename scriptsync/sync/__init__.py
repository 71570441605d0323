# ScriptSync Sync Module
# Project file synchronization engine and its components

from scriptsync.sync.classify import DEFAULT_EXTENSIONS, FileExtensions, classify, is_typescript
from scriptsync.sync.conflicts import ExtensionConflict, find_conflicts
from scriptsync.sync.engine import (
    SyncEngine,
    Transpiler,
    changed_files,
    collapse_untracked,
    plan_pull,
    plan_push,
    removed_remote_files,
    transpile_plan,
    walk_local_tree,
    write_pull_plan,
)
from scriptsync.sync.files import (
    MANIFEST_FILENAME,
    MANIFEST_NAME,
    UNSUPPORTED,
    FileType,
    LocalFile,
    LocalFileWrite,
    PullPlan,
    PushFile,
    PushPlan,
    RemoteFile,
)
from scriptsync.sync.ignore import (
    DEFAULT_IGNORE_PATTERNS,
    IGNORE_FILE_NAME,
    IgnoreRule,
    IgnoreRuleSet,
    is_ignored,
    load_ignore_file,
    parse_ignore_text,
)
from scriptsync.sync.manifest import find_manifest, has_manifest_changed, local_manifest, normalize_line_endings
from scriptsync.sync.names import to_local_path, to_remote_name
from scriptsync.sync.order import missing_from_push_order, order_files, order_push_files

__all__ = [
    # Model
    "FileType",
    "UNSUPPORTED",
    "LocalFile",
    "RemoteFile",
    "PushFile",
    "LocalFileWrite",
    "PushPlan",
    "PullPlan",
    "MANIFEST_NAME",
    "MANIFEST_FILENAME",
    # Ignore
    "IGNORE_FILE_NAME",
    "DEFAULT_IGNORE_PATTERNS",
    "IgnoreRule",
    "IgnoreRuleSet",
    "is_ignored",
    "load_ignore_file",
    "parse_ignore_text",
    # Classify
    "FileExtensions",
    "DEFAULT_EXTENSIONS",
    "classify",
    "is_typescript",
    # Names
    "to_remote_name",
    "to_local_path",
    # Conflicts
    "ExtensionConflict",
    "find_conflicts",
    # Order
    "order_files",
    "order_push_files",
    "missing_from_push_order",
    # Manifest
    "has_manifest_changed",
    "find_manifest",
    "local_manifest",
    "normalize_line_endings",
    # Engine
    "SyncEngine",
    "Transpiler",
    "walk_local_tree",
    "plan_push",
    "plan_pull",
    "changed_files",
    "removed_remote_files",
    "collapse_untracked",
    "transpile_plan",
    "write_pull_plan",
]
