# ScriptSync Manifest Tests
# Tests for the manifest change guard

import pytest

from scriptsync.errors import MissingRemoteManifest
from scriptsync.sync.files import FileType, PushFile, RemoteFile
from scriptsync.sync.manifest import find_manifest, has_manifest_changed, local_manifest


def manifest(source: str) -> RemoteFile:
    return RemoteFile(name="appsscript", type=FileType.JSON, source=source)


class TestHasManifestChanged:
    """Tests for has_manifest_changed()."""

    def test_unchanged(self):
        assert has_manifest_changed('{"a": 1}\n', [manifest('{"a": 1}\n')]) is False

    def test_changed(self):
        assert has_manifest_changed('{"a": 2}\n', [manifest('{"a": 1}\n')]) is True

    def test_line_endings_ignored(self):
        """Test that CRLF and CR differences are not a change."""
        remote = [manifest('{\n  "a": 1\n}\n')]
        assert has_manifest_changed('{\r\n  "a": 1\r\n}\r\n', remote) is False
        assert has_manifest_changed('{\r  "a": 1\r}\r', remote) is False

    def test_missing_remote_manifest(self):
        """Test that a remote without a manifest is an error."""
        remote = [RemoteFile(name="Code", type=FileType.SERVER_JS, source="")]
        with pytest.raises(MissingRemoteManifest):
            has_manifest_changed("{}", remote)


class TestFindManifest:
    """Tests for manifest lookup."""

    def test_script_named_appsscript_is_not_manifest(self):
        files = [RemoteFile(name="appsscript", type=FileType.SERVER_JS, source="")]
        assert find_manifest(files) is None

    def test_local_manifest(self):
        files = [
            PushFile(local_path="Code.js", remote=RemoteFile("Code", FileType.SERVER_JS)),
            PushFile(local_path="appsscript.json", remote=manifest("{}")),
        ]
        found = local_manifest(files)
        assert found is not None
        assert found.local_path == "appsscript.json"
