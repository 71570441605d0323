"""ScriptSync - file synchronization for remote script projects.

Keeps a local working directory in sync with a script project whose files
live on a remote service as a flat list of typed records.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "PushPlan",
    "PullPlan",
    "RemoteFile",
    "FileType",
    "IgnoreRuleSet",
    "ProjectContext",
    "ProjectSettings",
    "load_project_context",
    "ScriptApiStore",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "PushPlan", "PullPlan", "RemoteFile", "FileType", "IgnoreRuleSet"):
        from scriptsync import sync

        return getattr(sync, name)
    if name in ("ProjectContext", "ProjectSettings", "load_project_context"):
        from scriptsync import project

        return getattr(project, name)
    if name == "ScriptApiStore":
        from scriptsync.remote import ScriptApiStore

        return ScriptApiStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
