# ScriptSync Test Fixtures
# Pytest fixtures for ScriptSync tests

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Optional

import pytest

from scriptsync.sync.files import FileType, RemoteFile

ENV_VARS = (
    "SCRIPTSYNC_PROJECT",
    "SCRIPTSYNC_IGNORE",
    "SCRIPTSYNC_CONFIG",
    "SCRIPTSYNC_ACCESS_TOKEN",
)

MANIFEST_SOURCE = '{\n  "timeZone": "UTC",\n  "runtimeVersion": "V8"\n}\n'


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of the caller's environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def make_tree() -> Callable[[Path, dict[str, str]], Path]:
    """Return a helper that writes {relative path: content} below a directory."""

    def _make_tree(base: Path, files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return base

    return _make_tree


@pytest.fixture
def project_dir(temp_dir: Path, make_tree) -> Path:
    """A project with a script, the manifest and a stray text file."""
    project = temp_dir / "project"
    project.mkdir()
    make_tree(
        project,
        {
            ".clasp.json": json.dumps({"scriptId": "abc123"}),
            "Code.js": "function main() {}\n",
            "appsscript.json": MANIFEST_SOURCE,
            "notes.txt": "not a script\n",
        },
    )
    return project


class FakeStore:
    """In-memory remote project store."""

    def __init__(self, files: Optional[list[RemoteFile]] = None):
        self.files = list(files or [])
        self.fetch_calls: list[tuple[str, Optional[int]]] = []
        self.updates: list[tuple[str, list[RemoteFile]]] = []
        self.closed = False

    def fetch(self, script_id: str, version_number: Optional[int] = None) -> list[RemoteFile]:
        self.fetch_calls.append((script_id, version_number))
        return list(self.files)

    def update(self, script_id: str, files) -> None:
        self.updates.append((script_id, list(files)))
        self.files = list(files)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def remote_manifest() -> RemoteFile:
    """Remote manifest identical to the local one in project_dir."""
    return RemoteFile(name="appsscript", type=FileType.JSON, source=MANIFEST_SOURCE)


@pytest.fixture
def fake_store(remote_manifest: RemoteFile) -> FakeStore:
    """Remote store holding only the manifest."""
    return FakeStore([remote_manifest])
