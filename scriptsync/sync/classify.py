# ScriptSync File Classifier
# Maps local file extensions to remote file types

from collections.abc import Iterable
from dataclasses import dataclass

from scriptsync.sync.files import MANIFEST_NAME, UNSUPPORTED, FileKind, FileType
from scriptsync.utils.paths import split_extension, to_posix

TYPESCRIPT_EXTENSIONS: tuple[str, ...] = (".ts",)


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and make sure it starts with a dot."""
    ext = extension.strip().lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext


@dataclass(frozen=True)
class FileExtensions:
    """Local extensions accepted for each remote file type."""

    server_js: tuple[str, ...] = (".js", ".gs")
    html: tuple[str, ...] = (".html",)
    json: tuple[str, ...] = (".json",)
    typescript: tuple[str, ...] = TYPESCRIPT_EXTENSIONS

    @classmethod
    def from_settings(
        cls,
        *,
        file_extension: str | None = None,
        script_extensions: Iterable[str] | None = None,
        html_extensions: Iterable[str] | None = None,
        json_extensions: Iterable[str] | None = None,
    ) -> "FileExtensions":
        """
        Build the extension table from project settings.

        The legacy single `fileExtension` replaces the script extensions;
        `scriptExtensions` and `htmlExtensions` take precedence over it.
        `jsonExtensions` only affects how the manifest is recognised.
        """
        server_js = cls.server_js
        html = cls.html
        json = cls.json
        if file_extension:
            server_js = (normalize_extension(file_extension),)
        if script_extensions:
            server_js = tuple(normalize_extension(e) for e in script_extensions)
        if html_extensions:
            html = tuple(normalize_extension(e) for e in html_extensions)
        if json_extensions:
            json = tuple(normalize_extension(e) for e in json_extensions)
        return cls(server_js=server_js, html=html, json=json)

    @property
    def primary_script_extension(self) -> str:
        """Extension used when creating script files locally."""
        return self.server_js[0] if self.server_js else ".js"

    @property
    def primary_html_extension(self) -> str:
        return self.html[0] if self.html else ".html"

    @property
    def primary_json_extension(self) -> str:
        return self.json[0] if self.json else ".json"


DEFAULT_EXTENSIONS = FileExtensions()


def is_manifest_path(path: str, extensions: FileExtensions = DEFAULT_EXTENSIONS) -> bool:
    """Check if a content-root relative path is the project manifest."""
    stem, ext = split_extension(to_posix(path))
    return stem.lower() == MANIFEST_NAME and ext.lower() in extensions.json


def is_typescript(path: str, extensions: FileExtensions = DEFAULT_EXTENSIONS) -> bool:
    """Check if a path is a TypeScript source that needs transpiling."""
    _, ext = split_extension(to_posix(path))
    return ext.lower() in extensions.typescript


def classify(path: str, extensions: FileExtensions = DEFAULT_EXTENSIONS) -> FileKind:
    """
    Classify a local file by extension.

    Args:
        path: Path relative to the content root.
        extensions: Extension table to classify with.

    Returns:
        The remote FileType, or UNSUPPORTED.
    """
    normalized = to_posix(path)
    _, ext = split_extension(normalized)
    ext = ext.lower()

    if ext in extensions.server_js or ext in extensions.typescript:
        return FileType.SERVER_JS
    if ext in extensions.html:
        return FileType.HTML
    # Only the manifest at the content root is a valid JSON file
    if is_manifest_path(normalized, extensions):
        return FileType.JSON
    return UNSUPPORTED
