# ScriptSync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class CredentialsConfig(BaseModel):
    """Where the API access token comes from."""

    token_env: str = Field(default="SCRIPTSYNC_ACCESS_TOKEN", description="Environment variable holding a token")
    path: str = Field(default="~/.clasprc.json", description="JSON credentials file")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class ApiConfig(BaseModel):
    """Remote script API settings."""

    base_url: str = Field(default="https://script.googleapis.com/v1", description="API base URL")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class TranspilerConfig(BaseModel):
    """External TypeScript transpiler command."""

    command: list[str] | None = Field(default=None, description="Command reading stdin, writing stdout")
    timeout: float = Field(default=60.0, gt=0, description="Per-file timeout in seconds")

    @field_validator("command", mode="before")
    @classmethod
    def split_command(cls, v):
        """Accept a plain string command."""
        if isinstance(v, str):
            return v.split() or None
        return v or None


class IoConfig(BaseModel):
    """Local file I/O settings."""

    max_workers: int = Field(default=5, ge=1, le=16, description="Concurrent file reads/writes")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: str | None = Field(default=None, description="Path to log file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_path(cls, v: str | None) -> str | None:
        """Expand ~ in optional path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class ScriptSyncConfig(BaseModel):
    """Root configuration model for ScriptSync."""

    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig, description="Credential source")
    api: ApiConfig = Field(default_factory=ApiConfig, description="Remote API settings")
    transpiler: TranspilerConfig = Field(default_factory=TranspilerConfig, description="TypeScript transpiler")
    io: IoConfig = Field(default_factory=IoConfig, description="File I/O settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
