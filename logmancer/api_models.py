"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string or null")
    return value


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise TypeError(f"field {key!r} must be an integer or null")
    return value


def _require_bool(data: dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise TypeError(f"field {key!r} must be a boolean")
    return value


@dataclass
class OpenServerFileRequest:
    path: str


@dataclass
class OpenServerFileResponse:
    file_id: str


@dataclass
class ApiError:
    code: str
    message: str


@dataclass
class ServerBrowserStatusResponse:
    enabled: bool
    message: str | None = None


@dataclass
class ServerBrowserListRequest:
    path: str


@dataclass
class ServerBrowserEntry:
    """One file or directory inside the browsable server root."""

    name: str
    path: str
    entry_type: str
    size: int | None = None
    modified: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServerBrowserEntry:
        return cls(
            name=_require_str(data, "name"),
            path=_require_str(data, "path"),
            entry_type=_require_str(data, "entry_type"),
            size=_optional_int(data, "size"),
            modified=_optional_str(data, "modified"),
        )


@dataclass
class ServerBrowserListResponse:
    """Contents of one directory of the server root."""

    current_path: str
    current_display_path: str
    can_go_up: bool
    entries: list[ServerBrowserEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServerBrowserListResponse:
        entries = data["entries"]
        if not isinstance(entries, list):
            raise TypeError("field 'entries' must be a list")
        return cls(
            current_path=_require_str(data, "current_path"),
            current_display_path=_require_str(data, "current_display_path"),
            can_go_up=_require_bool(data, "can_go_up"),
            entries=[ServerBrowserEntry.from_dict(entry) for entry in entries],
        )


@dataclass
class ServerBrowserOpenRequest:
    path: str


@dataclass
class FileInfoRequest:
    file_id: str


@dataclass
class ReadPageRequest:
    file_id: str
    start_line: int
    max_lines: int


@dataclass
class TailRequest:
    file_id: str
    max_lines: int
    follow: bool


@dataclass
class ApplyFilterRequest:
    file_id: str
    filter: str


@dataclass
class ReadFilterRequest:
    file_id: str
    start_line: int
    max_lines: int


def to_dict(value: Any) -> dict[str, Any]:
    """Plain dictionary of an API body, ready to serialise as JSON."""
    if not is_dataclass(value) or isinstance(value, type):
        raise TypeError(f"{type(value).__name__} is not an API body")
    return asdict(value)