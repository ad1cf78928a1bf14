from __future__ import annotations

from typing import Iterable, List, Set

from md2rtf.models import Document
from md2rtf.utils import get_logger

logger = get_logger(__name__)


def dedup_key(doc: Document) -> str:
    # Only surrounding whitespace is ignored; internal differences keep docs apart
    return (doc.content or "").strip()


def dedupe(docs: Iterable[Document]) -> List[Document]:
    """Drop documents whose trimmed content equals an earlier one.

    Input order is kept and the first occurrence wins.
    """
    seen: Set[str] = set()
    out: List[Document] = []
    total = 0
    for doc in docs:
        total += 1
        key = dedup_key(doc)
        if key in seen:
            logger.debug("dedup.exact: dropped name=%s", doc.name)
            continue
        seen.add(key)
        out.append(doc)

    logger.info("dedup.exact: kept=%d from=%d", len(out), total)
    return out
