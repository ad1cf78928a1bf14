"""Markdown to RTF rendering.

`render` turns one normalized markdown document into an RTF fragment (no
header, no font table); `assemble` wraps fragments into a complete document.

Styling primitives are limited to bold, italic, three heading sizes and two
font slots: ``\\f0`` (serif body font) and ``\\f1`` (monospace code font).
"""

from __future__ import annotations

import enum
import re
import typing as t

PAR = "\\par"
PAGE = "\\page"

TITLE_SIZE = 28
HEADING_SIZES = {1: 24, 2: 20, 3: 18}
CODE_SIZE = 16
BODY_SIZE = 24
DOCUMENT_TITLE = "Combined Markdown Document"
DOCUMENT_TITLE_SIZE = 32

BODY_FONT = "Times New Roman"
CODE_FONT = "Courier New"

_BOLD_SPAN = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_SPAN = re.compile(r"\*(.*?)\*")
_ORDERED_ITEM = re.compile(r"^\d+\.\s")


class LineKind(enum.Enum):
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    BOLD_SPAN = "bold_span"
    ITALIC_SPAN = "italic_span"
    CODE_FENCE = "code_fence"
    BULLET_ITEM = "bullet_item"
    ORDERED_ITEM = "ordered_item"
    BLANK = "blank"
    PLAIN = "plain"


def classify(line: str) -> LineKind:
    """Classify one trimmed line; the first matching test wins."""
    if line.startswith("# "):
        return LineKind.HEADING1
    if line.startswith("## "):
        return LineKind.HEADING2
    if line.startswith("### "):
        return LineKind.HEADING3
    if "**" in line:
        return LineKind.BOLD_SPAN
    if "*" in line:
        return LineKind.ITALIC_SPAN
    if line.startswith("```"):
        return LineKind.CODE_FENCE
    if line.startswith("- ") or line.startswith("* "):
        return LineKind.BULLET_ITEM
    if _ORDERED_ITEM.match(line):
        return LineKind.ORDERED_ITEM
    if line == "":
        return LineKind.BLANK
    return LineKind.PLAIN


def _heading(text: str, size: int) -> str:
    return "{\\b\\fs%d %s}%s%s" % (size, text, PAR, PAR)


def render_line(line: str) -> str:
    line = line.strip()
    kind = classify(line)

    if kind is LineKind.HEADING1:
        return _heading(line[2:], HEADING_SIZES[1])
    if kind is LineKind.HEADING2:
        return _heading(line[3:], HEADING_SIZES[2])
    if kind is LineKind.HEADING3:
        return _heading(line[4:], HEADING_SIZES[3])
    if kind is LineKind.BOLD_SPAN:
        # lone italic markers on the same line are left literal
        return _BOLD_SPAN.sub(lambda m: "{\\b %s}" % m.group(1), line) + PAR
    if kind is LineKind.ITALIC_SPAN:
        return _ITALIC_SPAN.sub(lambda m: "{\\i %s}" % m.group(1), line) + PAR
    if kind is LineKind.CODE_FENCE:
        return "{\\f1\\fs%d %s}%s" % (CODE_SIZE, line, PAR)
    if kind is LineKind.BULLET_ITEM:
        return "\\bullet %s%s" % (line[2:], PAR)
    if kind is LineKind.BLANK:
        return PAR
    # ordered items keep their own numbering
    return line + PAR


def render(content: str, title: t.Optional[str] = None) -> str:
    """Render one markdown document as an RTF fragment.

    Pieces are separated by newlines: RTF readers ignore them, and they end
    the preceding control word so ``\\par`` never runs into the next line's
    text. The fragment always ends with two paragraph breaks.
    """
    parts: t.List[str] = []
    if title:
        parts.append("{\\b\\fs%d %s}%s%s" % (TITLE_SIZE, title, PAR, PAR))
    if content:
        parts.extend(render_line(line) for line in content.split("\n"))
    parts.append(PAR + PAR)
    return "\n".join(parts)


def header() -> str:
    return "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 %s;}{\\f1 %s;}}\\f0\\fs%d" % (BODY_FONT, CODE_FONT, BODY_SIZE)


def title_block(document_count: int) -> str:
    return "\n".join(
        [
            "{\\b\\fs%d %s}%s%s" % (DOCUMENT_TITLE_SIZE, DOCUMENT_TITLE, PAR, PAR),
            "{\\i Generated from %d selected markdown files}%s%s%s" % (document_count, PAR, PAR, PAR),
        ]
    )


def assemble(fragments: t.Sequence[str]) -> str:
    """Wrap rendered fragments into one RTF document, page break between each."""
    body = ("\n" + PAGE + "\n").join(fragments)
    parts = [header(), title_block(len(fragments))]
    if body:
        parts.append(body)
    return "\n".join(parts) + "}"
