# ScriptSync Project Loader
# Locates the project directory and loads settings and ignore rules

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from scriptsync.errors import ProjectNotFoundError, SettingsError
from scriptsync.project.schema import ProjectSettings
from scriptsync.sync.ignore import IGNORE_FILE_NAME, IgnoreRuleSet, load_ignore_file
from scriptsync.utils.paths import atomic_write, to_posix

SETTINGS_FILE_NAME = ".clasp.json"

PROJECT_ENV = "SCRIPTSYNC_PROJECT"
IGNORE_ENV = "SCRIPTSYNC_IGNORE"


@dataclass(frozen=True)
class ProjectContext:
    """Everything a sync pass needs to know about the local project."""

    project_dir: Path
    settings_path: Path
    settings: ProjectSettings
    ignore_rules: IgnoreRuleSet = field(default_factory=IgnoreRuleSet.default)
    ignore_path: Optional[Path] = None

    @property
    def content_dir(self) -> Path:
        """Absolute content root (project dir joined with rootDir)."""
        if self.settings.root_dir:
            return (self.project_dir / self.settings.root_dir).resolve()
        return self.project_dir

    @property
    def root_dir(self) -> str:
        """Content root relative to the project directory, posix style."""
        return to_posix(os.path.relpath(self.content_dir, self.project_dir))

    @property
    def script_id(self) -> str:
        return self.settings.script_id


def _resolve_file(candidate: Path, file_name: str) -> Path:
    """Accept either a file path or a directory holding file_name."""
    candidate = candidate.expanduser()
    if candidate.is_dir():
        return candidate / file_name
    return candidate


def find_settings_file(start: Optional[Path] = None) -> Path:
    """
    Find the project settings file.

    Honours the SCRIPTSYNC_PROJECT environment variable (file or directory),
    otherwise searches upward from start (default: current directory).

    Raises:
        ProjectNotFoundError: If no settings file is found.
    """
    env_path = os.environ.get(PROJECT_ENV)
    if env_path:
        settings_path = _resolve_file(Path(env_path), SETTINGS_FILE_NAME)
        if not settings_path.is_file():
            raise ProjectNotFoundError(f"Project settings not found: {settings_path}")
        return settings_path.resolve()

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        settings_path = directory / SETTINGS_FILE_NAME
        if settings_path.is_file():
            return settings_path

    raise ProjectNotFoundError(
        f"No {SETTINGS_FILE_NAME} found in {current} or any parent directory.\n"
        "Run this command inside a script project."
    )


def find_ignore_file(project_dir: Path) -> Optional[Path]:
    """Find the ignore file, honouring SCRIPTSYNC_IGNORE."""
    env_path = os.environ.get(IGNORE_ENV)
    if env_path:
        candidate = _resolve_file(Path(env_path), IGNORE_FILE_NAME)
    else:
        candidate = project_dir / IGNORE_FILE_NAME
    return candidate if candidate.is_file() else None


def read_settings_data(settings_path: Path) -> dict[str, Any]:
    """Read the raw JSON object of a settings file."""
    try:
        text = settings_path.read_text(encoding="utf-8-sig")
        data = json.loads(text) if text.strip() else {}
    except (OSError, json.JSONDecodeError) as e:
        raise SettingsError(f"Cannot read project settings {settings_path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Project settings must be a JSON object: {settings_path}")
    return data


def parse_settings(data: dict[str, Any], source: Optional[Path] = None) -> ProjectSettings:
    """Validate raw settings data."""
    try:
        return ProjectSettings.model_validate(data)
    except ValidationError as e:
        where = f" in {source}" if source else ""
        errors = "; ".join(f"{'.'.join(str(l) for l in err['loc'])}: {err['msg']}" for err in e.errors())
        raise SettingsError(f"Invalid project settings{where}: {errors}") from e


def load_project_settings(settings_path: Path) -> ProjectSettings:
    """
    Load and validate project settings.

    Args:
        settings_path: Path to the settings file.

    Returns:
        Validated ProjectSettings.

    Raises:
        SettingsError: If the file is unreadable or invalid.
    """
    return parse_settings(read_settings_data(settings_path), settings_path)


def save_project_settings(settings: ProjectSettings, settings_path: Path) -> Path:
    """Write settings back as 2-space indented JSON."""
    content = json.dumps(settings.to_json_dict(), indent=2, ensure_ascii=False) + "\n"
    atomic_write(settings_path, content)
    return settings_path


def load_project_context(start: Optional[Path] = None) -> ProjectContext:
    """
    Load the full project context for a sync pass.

    Args:
        start: Directory to start searching from (default: current directory).

    Returns:
        ProjectContext with settings and ignore rules.
    """
    settings_path = find_settings_file(start)
    project_dir = settings_path.parent
    settings = load_project_settings(settings_path)
    ignore_path = find_ignore_file(project_dir)

    return ProjectContext(
        project_dir=project_dir,
        settings_path=settings_path,
        settings=settings,
        ignore_rules=load_ignore_file(ignore_path),
        ignore_path=ignore_path,
    )


SETTABLE_KEYS = ("scriptId", "rootDir", "projectId", "fileExtension")


def update_project_setting(settings_path: Path, key: str, value: str) -> Any:
    """
    Set one string setting and save the file.

    Unknown keys in the file are preserved.

    Args:
        settings_path: Path to the settings file.
        key: On-disk key name, one of SETTABLE_KEYS.
        value: New value.

    Returns:
        The previous value, or None if the key was unset.

    Raises:
        SettingsError: If the key cannot be set or the result is invalid.
    """
    if key not in SETTABLE_KEYS:
        raise SettingsError(f"Unknown or read-only setting: {key}. Settable keys: {', '.join(SETTABLE_KEYS)}")

    data = read_settings_data(settings_path)
    previous = data.get(key)
    data[key] = value
    save_project_settings(parse_settings(data, settings_path), settings_path)
    return previous
