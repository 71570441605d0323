# ScriptSync Path Utilities
# Path normalisation, atomic writes and bounded concurrent file I/O

import logging
import os
import tempfile
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path, PurePosixPath

from scriptsync.errors import LocalReadError

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 5


def to_posix(path: str | os.PathLike[str]) -> str:
    """
    Normalise a relative path to forward slashes without a leading "./".

    Args:
        path: Path string or Path object.

    Returns:
        Normalised posix path string. The current directory becomes "".
    """
    path_str = os.fspath(path).replace("\\", "/")
    while path_str.startswith("./"):
        path_str = path_str[2:]
    path_str = path_str.lstrip("/")
    if path_str in ("", "."):
        return ""
    return PurePosixPath(path_str).as_posix()


def split_extension(path: str) -> tuple[str, str]:
    """
    Split a posix path into stem path and extension.

    Only the final path component is considered, so dotted directory
    names are kept intact. Hidden files without an extension keep their name.
    """
    head, _, tail = path.rpartition("/")
    stem, ext = os.path.splitext(tail)
    stem_path = f"{head}/{stem}" if head else stem
    return stem_path, ext


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def read_text(path: Path) -> str:
    """Read a file as UTF-8, keeping its newlines untouched."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def read_text_files(
    base: Path,
    relative_paths: Iterable[str],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict[str, str]:
    """
    Read many text files with a bounded worker pool.

    Args:
        base: Directory the relative paths are resolved against.
        relative_paths: Posix paths relative to base.
        max_workers: Upper bound on concurrently open files.

    Returns:
        Mapping of relative path to content.

    Raises:
        LocalReadError: The first read or decode failure; remaining reads
            are cancelled.
    """
    paths = list(relative_paths)
    if not paths:
        return {}

    logger.debug("Reading %d files from %s with %d workers", len(paths), base, max_workers)
    contents: dict[str, str] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(read_text, base / rel): rel for rel in paths}
        for future in as_completed(futures):
            rel = futures[future]
            try:
                contents[rel] = future.result()
            except (OSError, UnicodeDecodeError) as e:
                for pending in futures:
                    pending.cancel()
                logger.debug("Reading %s failed: %s", rel, e)
                reason = "not valid UTF-8 text" if isinstance(e, UnicodeDecodeError) else (e.strerror or str(e))
                raise LocalReadError(rel, reason) from e

    return contents


def write_text_file(path: Path, content: str) -> Path:
    """Write a text file, creating parent directories."""
    atomic_write(path, content)
    logger.debug("Wrote %s", path)
    return path


def write_text_files(
    base: Path,
    files: Iterable[tuple[str, str]],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> tuple[list[str], dict[str, str]]:
    """
    Write many text files with a bounded worker pool.

    Every write is attempted; failures are collected instead of aborting.

    Args:
        base: Directory the relative paths are resolved against.
        files: Pairs of (relative path, content).
        max_workers: Upper bound on concurrently open files.

    Returns:
        Tuple of (written paths sorted, failures as path -> error message).
    """
    entries = list(files)
    written: list[str] = []
    failures: dict[str, str] = {}
    if not entries:
        return written, failures

    logger.debug("Writing %d files under %s with %d workers", len(entries), base, max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(write_text_file, base / rel, content): rel for rel, content in entries}
        for future in as_completed(futures):
            rel = futures[future]
            try:
                future.result()
            except OSError as e:
                logger.debug("Failed to write %s: %s", rel, e)
                failures[rel] = str(e)
            else:
                written.append(rel)

    return sorted(written), failures
