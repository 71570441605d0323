# ScriptSync Project Module
# Project settings schema and project context loading

from scriptsync.project.loader import (
    SETTABLE_KEYS,
    SETTINGS_FILE_NAME,
    ProjectContext,
    find_ignore_file,
    find_settings_file,
    load_project_context,
    load_project_settings,
    parse_settings,
    read_settings_data,
    save_project_settings,
    update_project_setting,
)
from scriptsync.project.schema import ProjectSettings

__all__ = [
    "SETTABLE_KEYS",
    "SETTINGS_FILE_NAME",
    "ProjectContext",
    "ProjectSettings",
    "find_settings_file",
    "find_ignore_file",
    "load_project_context",
    "load_project_settings",
    "parse_settings",
    "read_settings_data",
    "save_project_settings",
    "update_project_setting",
]
