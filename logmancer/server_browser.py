"""Browsing of files below a configured server directory."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path, PurePath

from logmancer.api_models import ServerBrowserEntry, ServerBrowserListResponse

ROOT_ENV_VAR = "LOGMANCER_SERVER_FILE_ROOT"
_PROBE_BYTES = 8192


@dataclass(frozen=True)
class ServerFileRoot:
    """The directory that server browsing is confined to, fully resolved."""

    canonical_path: Path

    @classmethod
    def from_env(cls) -> ServerFileRoot | None:
        """Root named by LOGMANCER_SERVER_FILE_ROOT, or None if unset or not a directory."""
        raw = os.environ.get(ROOT_ENV_VAR)
        if raw is None:
            return None
        trimmed = raw.strip()
        if not trimmed:
            return None
        try:
            canonical = Path(trimmed).resolve(strict=True)
        except (OSError, RuntimeError):
            return None
        if not canonical.is_dir():
            return None
        return cls(canonical)


class ServerBrowserError(Exception):
    """A browsing request that cannot be served, with its HTTP status and error code."""

    def __init__(self, status: HTTPStatus, code: str, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message


def _invalid_path() -> ServerBrowserError:
    return ServerBrowserError(HTTPStatus.BAD_REQUEST, "invalid_path", "Invalid path token.")


def _relative_posix(path: Path, root: Path) -> str:
    relative = path.relative_to(root)
    return "" if relative == Path(".") else relative.as_posix().replace("\\", "/")


def resolve_root_bound_path(root: ServerFileRoot, token: str) -> Path:
    """Resolve a path token relative to the root, refusing anything that leaves it."""
    trimmed = token.strip()
    requested = PurePath(trimmed) if trimmed else PurePath()

    if requested.is_absolute() or requested.anchor or ".." in requested.parts:
        raise _invalid_path()

    joined = root.canonical_path / requested
    try:
        canonical = joined.resolve(strict=True)
    except (OSError, RuntimeError) as error:
        raise ServerBrowserError(
            HTTPStatus.NOT_FOUND, "not_found", "Requested path was not found."
        ) from error

    if not canonical.is_relative_to(root.canonical_path):
        raise _invalid_path()
    return canonical


def _entry_for(root: ServerFileRoot, entry: os.DirEntry[str]) -> ServerBrowserEntry | None:
    try:
        canonical = Path(entry.path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None
    if not canonical.is_relative_to(root.canonical_path):
        return None
    try:
        info = entry.stat(follow_symlinks=False)
    except OSError:
        return None

    is_dir = stat.S_ISDIR(info.st_mode)
    is_file = stat.S_ISREG(info.st_mode)
    modified = str(int(info.st_mtime)) if info.st_mtime >= 0 else None
    return ServerBrowserEntry(
        name=entry.name,
        path=_relative_posix(canonical, root.canonical_path),
        entry_type="directory" if is_dir else "file",
        size=info.st_size if is_file else None,
        modified=modified,
    )


def list_directory(root: ServerFileRoot, dir_path: str | os.PathLike[str]) -> ServerBrowserListResponse:
    """List a directory inside the root, directories first, then by name ignoring case.

    Raises OSError if the directory cannot be read and ValueError if it lies
    outside the root. Entries that resolve outside the root are left out.
    """
    directory = Path(dir_path)
    with os.scandir(directory) as iterator:
        found = [_entry_for(root, entry) for entry in iterator]
    entries = sorted(
        (entry for entry in found if entry is not None),
        key=lambda entry: (entry.entry_type != "directory", entry.name.lower()),
    )

    if not directory.is_relative_to(root.canonical_path):
        raise ValueError(f"{directory} is outside the server root")
    current = _relative_posix(directory, root.canonical_path)

    return ServerBrowserListResponse(
        current_path=current,
        current_display_path=str(directory),
        can_go_up=bool(current),
        entries=entries,
    )


def is_text_readable(path: str | os.PathLike[str]) -> bool:
    """True if the start of the file is UTF-8 text without NUL bytes."""
    try:
        with open(path, "rb") as handle:
            probe = handle.read(_PROBE_BYTES)
    except OSError:
        return False
    if b"\0" in probe:
        return False
    try:
        probe.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True