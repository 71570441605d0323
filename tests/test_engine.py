# ScriptSync Engine Tests
# Tests for push/pull planning and plan execution

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from scriptsync.errors import (
    EmptyRemoteFileSet,
    ExtensionConflictError,
    LocalReadError,
    PullWriteError,
    TranspileError,
    TranspilerUnavailableError,
    UnsafeRemoteName,
)
from scriptsync.project import ProjectContext, ProjectSettings
from scriptsync.sync.engine import (
    SyncEngine,
    changed_files,
    collapse_untracked,
    plan_pull,
    plan_push,
    removed_remote_files,
    transpile_plan,
    walk_local_tree,
    write_pull_plan,
)
from scriptsync.sync.files import UNSUPPORTED, FileType, RemoteFile
from scriptsync.sync.ignore import IgnoreRuleSet


def settings(**kwargs: Any) -> ProjectSettings:
    return ProjectSettings(scriptId="abc123", **kwargs)


def make_context(project: Path, rules: Optional[IgnoreRuleSet] = None, **kwargs: Any) -> ProjectContext:
    return ProjectContext(
        project_dir=project,
        settings_path=project / ".clasp.json",
        settings=settings(**kwargs),
        ignore_rules=rules or IgnoreRuleSet.default(),
    )


class UpperTranspiler:
    """Transpiler stand-in that upper-cases its input."""

    def __init__(self):
        self.calls: list[Optional[dict]] = []

    def transpile(self, source: str, options: Optional[dict[str, Any]] = None) -> str:
        self.calls.append(options)
        return source.upper()


class FailingTranspiler:
    def transpile(self, source: str, options: Optional[dict[str, Any]] = None) -> str:
        raise TranspileError("boom")


class TestWalkLocalTree:
    """Tests for the local tree walk."""

    def test_classifies_and_filters(self, project_dir: Path):
        """Test ignore flags and types of walked files."""
        files = {f.relative_path: f for f in walk_local_tree(project_dir, None, IgnoreRuleSet.default())}

        assert files["Code.js"].api_type == FileType.SERVER_JS
        assert files["Code.js"].is_candidate
        assert files["appsscript.json"].api_type == FileType.JSON
        assert files["notes.txt"].is_ignored
        assert files["notes.txt"].api_type is UNSUPPORTED
        assert files[".clasp.json"].is_ignored

    def test_sorted_output(self, project_dir: Path):
        paths = [f.relative_path for f in walk_local_tree(project_dir, None, IgnoreRuleSet.default())]
        assert paths == sorted(paths)

    def test_missing_root_dir(self, project_dir: Path):
        assert walk_local_tree(project_dir, "missing", IgnoreRuleSet.default()) == []

    def test_non_recursive(self, project_dir: Path, make_tree):
        """Test that subdirectories are skipped when not recursive."""
        make_tree(project_dir, {"lib/util.js": "x"})
        paths = [f.relative_path for f in walk_local_tree(project_dir, None, IgnoreRuleSet.default(), recursive=False)]
        assert "lib/util.js" not in paths
        assert "Code.js" in paths


class TestPlanPush:
    """Tests for plan_push()."""

    def test_basic_project(self, project_dir: Path):
        """Test the {Code.js, appsscript.json, notes.txt} project."""
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())

        assert [f.remote.to_api() for f in plan.files] == [
            {"name": "Code", "type": "SERVER_JS", "source": "function main() {}\n"},
            {"name": "appsscript", "type": "JSON", "source": (project_dir / "appsscript.json").read_text()},
        ]
        assert "notes.txt" in plan.unsupported
        assert "notes.txt" not in plan.ignored
        assert "notes.txt" in plan.excluded
        assert plan.local_paths == ["Code.js", "appsscript.json"]

    def test_unsupported_listed_whatever_the_rules(self, project_dir: Path):
        """Test that unsupported files are listed apart with or without a matching rule."""
        rule_sets = (IgnoreRuleSet.from_patterns([]), IgnoreRuleSet.from_patterns(["notes.txt"]))
        for rules in rule_sets:
            plan = plan_push(project_dir, None, rules, settings())

            assert plan.unsupported == [".clasp.json", "notes.txt"]
            assert plan.ignored == []
            assert plan.local_paths == ["Code.js", "appsscript.json"]

    def test_root_dir(self, temp_dir: Path, make_tree):
        """Test that names are relative to rootDir and files outside are skipped."""
        make_tree(
            temp_dir,
            {
                "build.js": "outside",
                "src/appsscript.json": "{}",
                "src/main.js": "main",
                "src/lib/util.gs": "util",
            },
        )

        plan = plan_push(temp_dir, "src", IgnoreRuleSet.default(), settings(rootDir="src"))

        assert [f.name for f in plan.files] == ["appsscript", "lib/util", "main"]
        assert plan.local_paths == ["src/appsscript.json", "src/lib/util.gs", "src/main.js"]

    def test_ignore_rules_relative_to_root_dir(self, temp_dir: Path, make_tree):
        """Test that rules are matched against content-root relative paths."""
        make_tree(temp_dir, {"src/keep.js": "a", "src/skip.js": "b"})
        rules = IgnoreRuleSet.from_patterns(["skip.js"])

        plan = plan_push(temp_dir, "src", rules, settings(rootDir="src"))

        assert [f.name for f in plan.files] == ["keep"]
        assert plan.ignored == ["src/skip.js"]

    def test_push_order(self, project_dir: Path, make_tree):
        """Test filePushOrder ahead of name order."""
        make_tree(project_dir, {"a.js": "a", "z.js": "z"})

        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings(filePushOrder=["z.js", "appsscript.json"]))

        assert [f.name for f in plan.files] == ["z", "appsscript", "Code", "a"]

    def test_partial_push_order(self, temp_dir: Path, make_tree):
        """Test that listed files lead and the rest follow by name."""
        make_tree(temp_dir, {"a.js": "a", "b.js": "b", "c.js": "c"})

        ordered = plan_push(temp_dir, None, IgnoreRuleSet.default(), settings(filePushOrder=["b.js", "a.js"]))
        unordered = plan_push(temp_dir, None, IgnoreRuleSet.default(), settings())

        assert ordered.local_paths == ["b.js", "a.js", "c.js"]
        assert unordered.local_paths == ["a.js", "b.js", "c.js"]

    def test_undecodable_source_fails(self, project_dir: Path):
        """Test that a script file that is not UTF-8 raises a typed read error."""
        (project_dir / "bad.js").write_bytes(b"var s = '\xff\xfe';\n")

        with pytest.raises(LocalReadError) as exc_info:
            plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        assert exc_info.value.path == "bad.js"
        assert "bad.js" in exc_info.value.message

    def test_conflict_fails(self, project_dir: Path, make_tree):
        """Test that colliding names abort the plan."""
        make_tree(project_dir, {"Code.gs": "other"})

        with pytest.raises(ExtensionConflictError) as exc_info:
            plan_push(project_dir, None, IgnoreRuleSet.default(), settings())

        assert exc_info.value.conflicts[0].paths == ("Code.gs", "Code.js")

    def test_line_endings_preserved(self, project_dir: Path):
        """Test that sources are read without newline translation."""
        (project_dir / "Code.js").write_bytes(b"a();\r\nb();\r\n")

        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())

        assert plan.files[0].remote.source == "a();\r\nb();\r\n"

    def test_ignore_subdirectories(self, project_dir: Path, make_tree):
        make_tree(project_dir, {"lib/util.js": "x"})
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings(ignoreSubdirectories=True))
        assert "lib/util.js" not in plan.local_paths

    def test_typescript_flagged(self, project_dir: Path, make_tree):
        make_tree(project_dir, {"lib.ts": "let x: number = 1;"})
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        assert [f.local_path for f in plan.typescript_files] == ["lib.ts"]


class TestTranspilePlan:
    """Tests for transpile_plan()."""

    def test_no_typescript_is_noop(self, project_dir: Path):
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        assert transpile_plan(plan, None) is plan

    def test_missing_transpiler(self, project_dir: Path, make_tree):
        """Test that TypeScript without a transpiler fails."""
        make_tree(project_dir, {"lib.ts": "x"})
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())

        with pytest.raises(TranspilerUnavailableError) as exc_info:
            transpile_plan(plan, None)

        assert exc_info.value.paths == ["lib.ts"]

    def test_transpiles_sources(self, project_dir: Path, make_tree):
        """Test that only TypeScript sources are transpiled."""
        make_tree(project_dir, {"lib.ts": "let x = 1;"})
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        transpiler = UpperTranspiler()

        result = transpile_plan(plan, transpiler)

        sources = {f.local_path: f.remote.source for f in result.files}
        assert sources["lib.ts"] == "LET X = 1;"
        assert sources["Code.js"] == "function main() {}\n"
        assert result.typescript_files == []
        assert transpiler.calls == [{"path": "lib.ts"}]

    def test_transpile_error_names_file(self, project_dir: Path, make_tree):
        make_tree(project_dir, {"lib.ts": "x"})
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())

        with pytest.raises(TranspileError) as exc_info:
            transpile_plan(plan, FailingTranspiler())

        assert exc_info.value.path == "lib.ts"


class TestPlanPull:
    """Tests for plan_pull()."""

    def test_maps_remote_files(self):
        remote = [
            RemoteFile("lib/util", FileType.SERVER_JS, "util"),
            RemoteFile("appsscript", FileType.JSON, "{}"),
            RemoteFile("page", FileType.HTML, "<p>"),
        ]

        plan = plan_pull(remote, "src", "gs")

        assert plan.paths == ["src/appsscript.json", "src/lib/util.gs", "src/page.html"]

    def test_manifest_json_extension(self):
        """Test that the manifest is written with the configured JSON extension."""
        plan = plan_pull([RemoteFile("appsscript", FileType.JSON, "{}")], json_extension=".jsonc")
        assert plan.paths == ["appsscript.jsonc"]

    def test_empty_source_skipped(self):
        """Test that files with empty source create no local file."""
        remote = [RemoteFile("Code", FileType.SERVER_JS, "x"), RemoteFile("Empty", FileType.SERVER_JS, "")]

        plan = plan_pull(remote)

        assert plan.paths == ["Code.js"]
        assert plan.skipped_empty == ["Empty.js"]

    def test_empty_remote_fails(self):
        with pytest.raises(EmptyRemoteFileSet) as exc_info:
            plan_pull([], script_id="abc123")
        assert "abc123" in exc_info.value.message

    @pytest.mark.parametrize("name", ["../../escape", "lib/../../escape", "/etc/passwd", ".."])
    def test_name_outside_root_rejected(self, name: str):
        """Test that remote names climbing out of the content root are refused."""
        with pytest.raises(UnsafeRemoteName) as exc_info:
            plan_pull([RemoteFile(name, FileType.SERVER_JS, "x")], "src")
        assert exc_info.value.remote_name == name

    def test_name_with_inner_parent_kept(self):
        """Test that a name whose .. stays inside the root is accepted."""
        plan = plan_pull([RemoteFile("lib/../util", FileType.SERVER_JS, "x")], "src")
        assert plan.paths == ["src/lib/../util.js"]


class TestWritePullPlan:
    """Tests for write_pull_plan()."""

    def test_writes_nested_files(self, temp_dir: Path):
        plan = plan_pull(
            [RemoteFile("lib/util", FileType.SERVER_JS, "a\r\nb"), RemoteFile("Code", FileType.SERVER_JS, "c")],
            "src",
        )

        written = write_pull_plan(plan, temp_dir)

        assert written == ["src/Code.js", "src/lib/util.js"]
        assert (temp_dir / "src" / "lib" / "util.js").read_bytes() == b"a\r\nb"

    def test_partial_failure_collected(self, temp_dir: Path):
        """Test that one failing write does not stop the others."""
        (temp_dir / "blocker").write_text("file, not a directory", encoding="utf-8")
        plan = plan_pull(
            [RemoteFile("blocker/x", FileType.SERVER_JS, "x"), RemoteFile("ok", FileType.SERVER_JS, "ok")],
        )

        with pytest.raises(PullWriteError) as exc_info:
            write_pull_plan(plan, temp_dir)

        assert list(exc_info.value.failures) == ["blocker/x.js"]
        assert (temp_dir / "ok.js").read_text(encoding="utf-8") == "ok"


class TestChangeDetection:
    """Tests for comparing a push plan with the remote files."""

    def test_changed_and_removed(self, project_dir: Path, remote_manifest: RemoteFile):
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        remote = [remote_manifest, RemoteFile("Old", FileType.SERVER_JS, "old")]

        assert [f.name for f in changed_files(plan, remote)] == ["Code"]
        assert [f.name for f in removed_remote_files(plan, remote)] == ["Old"]

    def test_up_to_date(self, project_dir: Path, remote_manifest: RemoteFile):
        plan = plan_push(project_dir, None, IgnoreRuleSet.default(), settings())
        remote = [RemoteFile("Code", FileType.SERVER_JS, "function main() {}\n"), remote_manifest]

        assert changed_files(plan, remote) == []
        assert removed_remote_files(plan, remote) == []


class TestCollapseUntracked:
    """Tests for collapse_untracked()."""

    def test_collapses_untracked_directories(self):
        all_paths = ["a.js", "node_modules/x/y.js", "node_modules/z.js", "src/a.js", "src/b.txt", "notes.txt"]
        tracked = ["a.js", "src/a.js"]

        assert collapse_untracked(all_paths, tracked) == ["node_modules/", "notes.txt", "src/b.txt"]


class TestSyncEngine:
    """Tests for the SyncEngine facade."""

    def test_plan_push_and_status(self, project_dir: Path):
        engine = SyncEngine(make_context(project_dir))

        plan = engine.plan_push()

        assert plan.local_paths == ["Code.js", "appsscript.json"]
        assert engine.untracked_files() == [".clasp.json", "notes.txt"]

    def test_pull_round_trip(self, project_dir: Path, temp_dir: Path):
        """Test that pushed records pulled into an empty project reproduce the tree."""
        plan = SyncEngine(make_context(project_dir)).plan_push()

        target = temp_dir / "clone"
        target.mkdir()
        (target / ".clasp.json").write_text(json.dumps({"scriptId": "abc123"}), encoding="utf-8")
        clone = SyncEngine(make_context(target))
        written = clone.write(clone.plan_pull(plan.to_upload))

        assert written == ["Code.js", "appsscript.json"]
        for path in written:
            assert (target / path).read_text() == (project_dir / path).read_text()

    def test_pull_uses_settings(self, temp_dir: Path):
        engine = SyncEngine(make_context(temp_dir, rootDir="src", fileExtension="gs"))
        plan = engine.plan_pull([RemoteFile("Code", FileType.SERVER_JS, "x")])
        assert plan.paths == ["src/Code.gs"]
