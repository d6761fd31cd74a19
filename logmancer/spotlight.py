"""Helpers behind the server file picker: filtering, navigation and focus."""

from __future__ import annotations

from collections.abc import Iterable

from logmancer.api_models import ServerBrowserEntry


def filter_entries(
    entries: Iterable[ServerBrowserEntry], query: str
) -> list[ServerBrowserEntry]:
    """Entries whose name contains ``query``, ignoring case.

    A blank query keeps every entry.
    """
    needle = query.strip().lower()
    if not needle:
        return list(entries)
    return [entry for entry in entries if needle in entry.name.lower()]


def parent_path(path: str) -> str:
    """Path one level up from ``path``; the root stays the root."""
    trimmed = path.strip("/")
    if not trimmed:
        return ""
    return trimmed.rpartition("/")[0]


def first_focus_target(entries: Iterable[ServerBrowserEntry]) -> tuple[str, bool] | None:
    """Path of the first entry and whether it is a file, or None if there are none."""
    for entry in entries:
        return entry.path, entry.entry_type == "file"
    return None