# ScriptSync Remote Module
# Remote project store, credentials and transpiler

from scriptsync.remote.credentials import CredentialProvider, FileCredentialProvider
from scriptsync.remote.store import (
    DEFAULT_API_URL,
    RemoteProjectStore,
    ScriptApiStore,
    extract_syntax_error,
    format_snippet,
)
from scriptsync.remote.transpiler import CommandTranspiler

__all__ = [
    # Store
    "DEFAULT_API_URL",
    "RemoteProjectStore",
    "ScriptApiStore",
    "extract_syntax_error",
    "format_snippet",
    # Credentials
    "CredentialProvider",
    "FileCredentialProvider",
    # Transpiler
    "CommandTranspiler",
]
