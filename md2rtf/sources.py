"""Source adapters: collect markdown entries from a ZIP archive or a directory."""

from __future__ import annotations

import os
import typing as t
import zipfile
from dataclasses import dataclass, replace
from pathlib import Path

from md2rtf.models import Document
from md2rtf.utils import byte_size, get_logger

logger = get_logger(__name__)

MARKDOWN_SUFFIX = ".md"


class SourceError(ValueError):
    """Raised when an input location yields no usable markdown entries."""


@dataclass(frozen=True)
class SourceEntry:
    name: str
    content: str
    path: str
    size: int
    selected: bool = True

    def with_selected(self, selected: bool) -> "SourceEntry":
        return replace(self, selected=selected)

    def to_document(self) -> Document:
        return Document(name=self.name, content=self.content)


def entry_name(path: str) -> str:
    """Display title: base name with the first ``.md`` removed."""
    base = path.replace("\\", "/").rsplit("/", 1)[-1]
    return base.replace(MARKDOWN_SUFFIX, "", 1)


def make_entry(path: str, content: str) -> SourceEntry:
    return SourceEntry(name=entry_name(path), content=content, path=path, size=byte_size(content))


def _decode(raw: bytes, path: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceError(f"{path} is not valid UTF-8 text") from e


def load_zip(zip_path: str) -> t.List[SourceEntry]:
    entries: t.List[SourceEntry] = []
    try:
        with zipfile.ZipFile(zip_path) as zf:
            for info in zf.infolist():
                if info.is_dir() or not info.filename.endswith(MARKDOWN_SUFFIX):
                    continue
                entries.append(make_entry(info.filename, _decode(zf.read(info), info.filename)))
    except zipfile.BadZipFile as e:
        raise SourceError(f"Corrupt ZIP archive {zip_path}: {e}") from e
    return entries


def load_directory(dir_path: str) -> t.List[SourceEntry]:
    root = Path(dir_path)
    entries: t.List[SourceEntry] = []
    for file_path in sorted(root.rglob("*" + MARKDOWN_SUFFIX)):
        if not file_path.is_file():
            continue
        rel = file_path.relative_to(root).as_posix()
        entries.append(make_entry(rel, _decode(file_path.read_bytes(), rel)))
    return entries


def load_entries(path: str) -> t.List[SourceEntry]:
    """Load markdown entries from a ``.zip`` archive or a directory tree."""
    if os.path.isdir(path):
        entries = load_directory(path)
    elif zipfile.is_zipfile(path):
        entries = load_zip(path)
    else:
        raise SourceError(f"Cannot handle source: {path} (expected a ZIP archive or a directory)")

    if not entries:
        raise SourceError(f"No Markdown files found in {path}")

    logger.info("sources.load: path=%s entries=%d", path, len(entries))
    return entries
