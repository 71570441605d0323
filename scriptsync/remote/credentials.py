# ScriptSync Credentials
# Reads an issued access token and builds an authorized HTTP client

import json
import os
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx

from scriptsync.config.schema import ScriptSyncConfig
from scriptsync.errors import NotAuthenticatedError


class CredentialProvider(Protocol):
    """Source of an authorized HTTP client for the remote API."""

    def get_authorized_client(self) -> httpx.Client: ...


def _token_from_data(data: Any) -> Optional[str]:
    """Find an access token in the supported credentials file layouts."""
    for keys in (("access_token",), ("token", "access_token"), ("tokens", "default", "access_token")):
        value = data
        for key in keys:
            value = value.get(key) if isinstance(value, dict) else None
        if isinstance(value, str) and value:
            return value
    return None


class FileCredentialProvider:
    """
    Credential provider backed by an environment variable or a JSON file.

    Token acquisition and refresh happen elsewhere; this provider only
    reads a token that has already been issued.
    """

    def __init__(
        self,
        *,
        token_env: str = "SCRIPTSYNC_ACCESS_TOKEN",
        path: Optional[Path] = None,
        timeout: float = 30.0,
    ):
        self.token_env = token_env
        self.path = path
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ScriptSyncConfig) -> "FileCredentialProvider":
        return cls(
            token_env=config.credentials.token_env,
            path=Path(config.credentials.path).expanduser(),
            timeout=config.api.timeout,
        )

    def read_token(self) -> str:
        """
        Return the access token.

        Raises:
            NotAuthenticatedError: If no token is available.
        """
        token = os.environ.get(self.token_env, "").strip()
        if token:
            return token

        if self.path is not None and self.path.is_file():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise NotAuthenticatedError(f"Cannot read credentials file {self.path}: {e}") from e
            token = _token_from_data(data)
            if token:
                return token

        where = f" or {self.path}" if self.path else ""
        raise NotAuthenticatedError(f"No access token found. Set {self.token_env}{where}.")

    def get_authorized_client(self) -> httpx.Client:
        """Create an httpx client that sends the bearer token."""
        return httpx.Client(
            headers={"Authorization": f"Bearer {self.read_token()}"},
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
        )
