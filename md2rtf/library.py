"""Selection and browsing over a loaded entry collection.

The collection itself is an immutable tuple of `SourceEntry`. Views are
recomputed on demand by `project`, and selection changes return a new tuple,
so a filtered view can never drift out of sync with the backing collection.
Entries are addressed by their unique ``path``, never by view index.
"""

from __future__ import annotations

import typing as t

from md2rtf.sources import SourceEntry

SORT_KEYS: t.Dict[str, t.Callable[[SourceEntry], t.Any]] = {
    "name": lambda e: e.name.casefold(),
    "size": lambda e: e.size,
    "path": lambda e: e.path.casefold(),
}

Entries = t.Tuple[SourceEntry, ...]


def project(
    entries: t.Iterable[SourceEntry],
    *,
    search: str = "",
    sort_by: t.Optional[str] = None,
    descending: bool = False,
) -> t.List[SourceEntry]:
    """Filter by case-insensitive substring on name or path, then sort.

    Without ``sort_by`` the source order is kept (reversed when ``descending``).
    """
    if sort_by is not None and sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    needle = (search or "").casefold()
    matched = [e for e in entries if needle in e.name.casefold() or needle in e.path.casefold()]
    if sort_by is None:
        return matched[::-1] if descending else matched
    return sorted(matched, key=SORT_KEYS[sort_by], reverse=descending)


def toggle(entries: t.Iterable[SourceEntry], path: str) -> Entries:
    return tuple(e.with_selected(not e.selected) if e.path == path else e for e in entries)


def deselect(entries: t.Iterable[SourceEntry], paths: t.Iterable[str]) -> Entries:
    drop = set(paths)
    return tuple(e.with_selected(False) if e.path in drop else e for e in entries)


def select_all(entries: t.Iterable[SourceEntry]) -> Entries:
    return tuple(e.with_selected(True) for e in entries)


def select_none(entries: t.Iterable[SourceEntry]) -> Entries:
    return tuple(e.with_selected(False) for e in entries)


def selected(entries: t.Iterable[SourceEntry]) -> t.List[SourceEntry]:
    return [e for e in entries if e.selected]


def format_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 B"
    units = ["B", "KB", "MB"]
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    text = ("%.1f" % value).rstrip("0").rstrip(".")
    return f"{text} {units[i]}"
