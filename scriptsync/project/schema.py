# ScriptSync Project Settings Schema
# Pydantic model for the .clasp.json project settings file

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scriptsync.sync.classify import FileExtensions


class ProjectSettings(BaseModel):
    """Settings of one script project, stored as JSON in the project directory."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    script_id: str = Field(alias="scriptId", min_length=1, description="Remote script id")
    root_dir: str | None = Field(default=None, alias="rootDir", description="Content root for project files")
    file_extension: str | None = Field(
        default=None, alias="fileExtension", description="Local extension for script files"
    )
    file_push_order: list[str] | None = Field(
        default=None, alias="filePushOrder", description="Files to push first, in order"
    )
    parent_id: list[str] | None = Field(default=None, alias="parentId", description="Container document ids")
    project_id: str | None = Field(default=None, alias="projectId", description="Cloud project id")
    script_extensions: list[str] | None = Field(
        default=None, alias="scriptExtensions", description="Extensions treated as server scripts"
    )
    html_extensions: list[str] | None = Field(
        default=None, alias="htmlExtensions", description="Extensions treated as HTML"
    )
    json_extensions: list[str] | None = Field(
        default=None, alias="jsonExtensions", description="Extensions accepted for the manifest"
    )
    ignore_subdirectories: bool = Field(
        default=False, alias="ignoreSubdirectories", description="Only collect files at the content root"
    )

    @field_validator("parent_id", "script_extensions", "html_extensions", "json_extensions", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        """Accept a single string where a list is expected."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("file_extension")
    @classmethod
    def strip_dot(cls, v: str | None) -> str | None:
        """Store the script extension without a leading dot."""
        if v is None:
            return None
        return v.strip().lstrip(".") or None

    @property
    def extensions(self) -> FileExtensions:
        """Extension table for classifying local files."""
        return FileExtensions.from_settings(
            file_extension=self.file_extension,
            script_extensions=self.script_extensions,
            html_extensions=self.html_extensions,
            json_extensions=self.json_extensions,
        )

    @property
    def pull_extension(self) -> str:
        """Extension (without dot) for script files written by a pull."""
        if self.script_extensions or self.file_extension:
            return self.extensions.primary_script_extension.lstrip(".")
        return "js"

    @property
    def pull_json_extension(self) -> str:
        """Extension (without dot) for the manifest written by a pull."""
        return self.extensions.primary_json_extension.lstrip(".")

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise with the on-disk key names, keeping unknown keys."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude_unset=True)
