# ScriptSync File Model
# Local and remote file representations used by the sync engine

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

MANIFEST_NAME = "appsscript"
MANIFEST_FILENAME = "appsscript.json"


class FileType(str, Enum):
    """Remote file type. Values are the literal wire strings."""

    SERVER_JS = "SERVER_JS"
    HTML = "HTML"
    JSON = "JSON"


class Unsupported(Enum):
    """Classification outcome for files the remote project cannot hold."""

    UNSUPPORTED = "unsupported"

    def __repr__(self) -> str:
        return "UNSUPPORTED"


UNSUPPORTED = Unsupported.UNSUPPORTED

FileKind = Union[FileType, Unsupported]


@dataclass(frozen=True)
class LocalFile:
    """
    A file discovered during the local tree walk.

    `relative_path` is relative to the project directory, `root_path` to the
    content root (rootDir). Both use forward slashes.
    """

    relative_path: str
    is_ignored: bool
    api_type: FileKind
    root_path: str = ""
    is_typescript: bool = False

    @property
    def is_supported(self) -> bool:
        """Check if the file maps to a remote file type."""
        return self.api_type is not UNSUPPORTED

    @property
    def is_candidate(self) -> bool:
        """Check if the file takes part in a push."""
        return self.is_supported and not self.is_ignored


@dataclass(frozen=True)
class RemoteFile:
    """One file of the remote project, in wire shape."""

    name: str
    type: FileType
    source: str = ""

    def to_api(self) -> dict[str, str]:
        """Convert to the API record `{name, type, source}`."""
        return {"name": self.name, "type": self.type.value, "source": self.source}

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteFile":
        """Create from an API record."""
        return cls(
            name=data.get("name") or "",
            type=FileType(data["type"]),
            source=data.get("source") or "",
        )

    @property
    def is_manifest(self) -> bool:
        """Check if this is the project manifest."""
        return self.type == FileType.JSON and self.name == MANIFEST_NAME


@dataclass(frozen=True)
class PushFile:
    """A local file prepared for upload."""

    local_path: str
    remote: RemoteFile
    is_typescript: bool = False

    @property
    def name(self) -> str:
        return self.remote.name

    def with_source(self, source: str) -> "PushFile":
        """Return a copy with replaced source."""
        return replace(self, remote=replace(self.remote, source=source))


@dataclass(frozen=True)
class LocalFileWrite:
    """A single file write produced by a pull plan."""

    path: str
    source: str
    remote_name: str
    type: FileType


@dataclass
class PushPlan:
    """Result of planning a push."""

    files: list[PushFile] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    unsupported: list[str] = field(default_factory=list)

    @property
    def to_upload(self) -> list[RemoteFile]:
        """Remote records in upload order."""
        return [f.remote for f in self.files]

    @property
    def excluded(self) -> list[str]:
        """All paths left out of the push, ignored or unsupported."""
        return sorted(set(self.ignored) | set(self.unsupported))

    @property
    def typescript_files(self) -> list[PushFile]:
        """Files that still need transpiling."""
        return [f for f in self.files if f.is_typescript]

    @property
    def local_paths(self) -> list[str]:
        return [f.local_path for f in self.files]


@dataclass
class PullPlan:
    """Result of planning a pull."""

    writes: list[LocalFileWrite] = field(default_factory=list)
    skipped_empty: list[str] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [w.path for w in self.writes]
