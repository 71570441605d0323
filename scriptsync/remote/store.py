# ScriptSync Remote Store
# Reads and replaces the file list of a remote script project over HTTP

import logging
import posixpath
import re
from collections.abc import Sequence
from typing import Any, Optional, Protocol

import httpx

from scriptsync.errors import (
    NotAuthenticatedError,
    PushSyntaxError,
    RemoteStoreError,
    ScriptNotFoundError,
)
from scriptsync.sync.files import RemoteFile

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://script.googleapis.com/v1"

SYNTAX_ERROR_RE = re.compile(r"Syntax error: (.+?) line: (\d+) file: (.+)")

SNIPPET_CONTEXT_LINES = 2


class RemoteProjectStore(Protocol):
    """Storage of a remote project's files."""

    def fetch(self, script_id: str, version_number: Optional[int] = None) -> list[RemoteFile]: ...

    def update(self, script_id: str, files: Sequence[RemoteFile]) -> None: ...

    def close(self) -> None: ...


def format_snippet(source: str, line: int, context: int = SNIPPET_CONTEXT_LINES) -> str:
    """
    Render the lines around `line` (1-based), marking the failing one with '>'.
    """
    lines = source.split("\n")
    index = line - 1
    start = max(0, index - context)
    end = min(len(lines), index + context + 1)

    rendered = []
    for number, text in enumerate(lines[start:end], start=start + 1):
        marker = ">" if number == line else " "
        rendered.append(f"{marker} {number:4d} | {text}")
    return "\n".join(rendered)


def extract_syntax_error(message: str, files: Sequence[RemoteFile]) -> Optional[PushSyntaxError]:
    """
    Turn a remote syntax error message into a PushSyntaxError.

    Args:
        message: Error message returned by the remote service.
        files: Files of the rejected push, used for the snippet.

    Returns:
        PushSyntaxError, or None if the message is not a syntax error.
    """
    match = SYNTAX_ERROR_RE.search(message)
    if not match:
        return None

    error_name, line_str, file_name = match.group(1), match.group(2), match.group(3).strip()
    line = int(line_str)
    stem = posixpath.splitext(file_name)[0]

    snippet = "Could not retrieve code snippet."
    for file in files:
        if file.name in (file_name, stem) and file.source:
            snippet = format_snippet(file.source, line)
            break

    return PushSyntaxError(
        f'{error_name} in file "{file_name}" at line {line}',
        file_name=file_name,
        line=line,
        snippet=snippet,
    )


def _error_message(response: httpx.Response) -> Optional[str]:
    """Extract the message of a JSON error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return data.get("error_description") or error
    return data.get("message")


class ScriptApiStore:
    """
    Remote project store backed by the script REST API.

    Uses an already authorized httpx client. Requests are not retried.
    """

    def __init__(self, client: httpx.Client, base_url: str = DEFAULT_API_URL):
        """
        Initialize the store.

        Args:
            client: Authorized HTTP client.
            base_url: API base URL without trailing slash.
        """
        self.client = client
        self.base_url = base_url.rstrip("/")

    def __enter__(self) -> "ScriptApiStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def _content_url(self, script_id: str) -> str:
        return f"{self.base_url}/projects/{script_id}/content"

    def _raise_for_status(self, response: httpx.Response, files: Sequence[RemoteFile] = ()) -> None:
        """Map an unsuccessful response to a RemoteStoreError."""
        if response.is_success:
            return

        status_code = response.status_code
        message = _error_message(response)

        if status_code == 401:
            raise NotAuthenticatedError("Invalid or expired access token", status_code=status_code)
        if status_code == 403:
            raise RemoteStoreError(
                message or "Access forbidden - check that the script API is enabled",
                status_code=status_code,
            )
        if status_code == 404:
            raise ScriptNotFoundError("Script project not found", status_code=status_code)

        if message:
            syntax_error = extract_syntax_error(message, files)
            if syntax_error is not None:
                raise syntax_error
        raise RemoteStoreError(
            message or f"API request failed with status {status_code}",
            status_code=status_code,
        )

    def _request(self, method: str, url: str, files: Sequence[RemoteFile] = (), **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise RemoteStoreError(f"Network error: {e}") from e
        logger.debug("%s %s -> %d", method, url, response.status_code)
        self._raise_for_status(response, files)
        return response

    def fetch(self, script_id: str, version_number: Optional[int] = None) -> list[RemoteFile]:
        """
        Fetch the files of a remote project.

        Args:
            script_id: Remote script id.
            version_number: Optional version; HEAD when None.

        Returns:
            Remote files in server order.

        Raises:
            RemoteStoreError: On any unsuccessful response.
        """
        params = {"versionNumber": version_number} if version_number is not None else None
        response = self._request("GET", self._content_url(script_id), params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteStoreError("Invalid JSON in API response") from e

        try:
            files = [RemoteFile.from_api(record) for record in data.get("files") or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RemoteStoreError(f"Unexpected file record in API response: {e}") from e
        logger.debug("Fetched %d files from %s", len(files), script_id)
        return files

    def update(self, script_id: str, files: Sequence[RemoteFile]) -> None:
        """
        Replace the remote file list with `files`, in the given order.

        Raises:
            PushSyntaxError: If the service rejects a file with a syntax error.
            RemoteStoreError: On any other unsuccessful response.
        """
        payload = {"scriptId": script_id, "files": [f.to_api() for f in files]}
        self._request("PUT", self._content_url(script_id), files=files, json=payload)
        logger.debug("Pushed %d files to %s", len(files), script_id)
