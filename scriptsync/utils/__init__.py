# ScriptSync Utilities Module
# Helper functions for path handling and concurrent file I/O

from scriptsync.utils.paths import (
    DEFAULT_MAX_WORKERS,
    atomic_write,
    ensure_dir,
    read_text,
    read_text_files,
    split_extension,
    to_posix,
    write_text_files,
)

__all__ = [
    "DEFAULT_MAX_WORKERS",
    "to_posix",
    "split_extension",
    "ensure_dir",
    "atomic_write",
    "read_text",
    "read_text_files",
    "write_text_files",
]
