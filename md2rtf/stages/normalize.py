from __future__ import annotations

import re

from md2rtf.models import Document

CODE_FENCE = "```"
CODE_INDENT = "    "

_BLANK_RUN = re.compile(r"\n(?:[^\S\n]*\n){2,}")
_TRAILING_WS = re.compile(r"[^\S\n]+$", re.MULTILINE)
_INLINE_WS = re.compile(r"[^\S\n]+")


def is_code_line(line: str) -> bool:
    return line.strip().startswith(CODE_FENCE) or line.startswith(CODE_INDENT)


def normalize(content: str) -> str:
    """Collapse redundant whitespace in markdown, leaving code lines verbatim.

    - At most one blank line between paragraphs
    - No trailing spaces or tabs on any line
    - Inner whitespace runs become a single space, except on fence-marker
      lines and lines indented by four spaces
    - No leading or trailing whitespace around the whole text

    The document is trimmed before inner runs are collapsed so the code-line
    test sees each line exactly as it is emitted; that keeps the function
    idempotent when the first line is indented.
    """
    text = (content or "").replace("\r\n", "\n").replace("\r", "\n")
    text = _BLANK_RUN.sub("\n\n", text)
    text = _TRAILING_WS.sub("", text)
    text = text.strip()

    lines = [line if is_code_line(line) else _INLINE_WS.sub(" ", line) for line in text.split("\n")]
    return "\n".join(lines)


def normalize_document(doc: Document) -> Document:
    return doc.with_content(normalize(doc.content))
