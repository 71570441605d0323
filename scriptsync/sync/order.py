# ScriptSync Push Order
# Deterministic upload order from a partial user preference

import math
from collections.abc import Iterable, Sequence

from scriptsync.sync.files import PushFile, RemoteFile
from scriptsync.utils.paths import to_posix


def _ranks(preference: Sequence[str] | None) -> dict[str, int]:
    """Map each preference entry to the index of its first occurrence."""
    ranks: dict[str, int] = {}
    for index, entry in enumerate(preference or ()):
        ranks.setdefault(to_posix(entry), index)
    return ranks


def _rank(keys: Iterable[str], ranks: dict[str, int]) -> float:
    return min((ranks[k] for k in keys if k in ranks), default=math.inf)


def order_files(files: Iterable[RemoteFile], preference: Sequence[str] | None = None) -> list[RemoteFile]:
    """
    Order remote files for upload.

    Files named in preference come first, in preference order; the rest
    follow sorted by name.
    """
    ranks = _ranks(preference)
    return sorted(files, key=lambda f: (_rank((f.name,), ranks), f.name))


def order_push_files(files: Iterable[PushFile], preference: Sequence[str] | None = None) -> list[PushFile]:
    """
    Order push files for upload.

    A preference entry matches a file by its project relative local path
    (`src/lib.js`) or by its remote name (`lib`).
    """
    ranks = _ranks(preference)
    return sorted(
        files,
        key=lambda f: (_rank((f.local_path, f.name), ranks), f.name, f.local_path),
    )


def missing_from_push_order(files: Iterable[PushFile], preference: Sequence[str] | None) -> list[str]:
    """Preference entries that match none of the files."""
    known: set[str] = set()
    for file in files:
        known.add(file.local_path)
        known.add(file.name)
    return [entry for entry in preference or () if to_posix(entry) not in known]
