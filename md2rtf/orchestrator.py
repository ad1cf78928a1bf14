import time
import uuid
import yaml
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any, List, Optional, Sequence

from md2rtf import library
from md2rtf.models import ConversionResult, Document
from md2rtf.rendering.rtf import assemble, render
from md2rtf.sources import load_entries
from md2rtf.stages.dedup import dedupe
from md2rtf.stages.normalize import normalize_document
from md2rtf.stages.optimize import optimize as optimize_rtf
from md2rtf.utils import write_output, validate_config, get_logger

logger = get_logger(__name__)


class EmptySelectionError(ValueError):
    """Raised when a conversion is requested with no documents selected."""


def _render_one(doc: Document) -> str:
    return render(doc.content, doc.name)


def _render_all(docs: Sequence[Document], workers: int) -> List[str]:
    if workers <= 1 or len(docs) <= 1:
        return [_render_one(d) for d in docs]
    # map() yields in submission order, so fragments stay in document order
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_render_one, docs))


def convert_documents(
    docs: Sequence[Document],
    *,
    optimize: bool = True,
    workers: int = 1,
) -> ConversionResult:
    """Run dedup -> normalize -> render -> optimize over selected documents.

    With ``optimize`` off, documents are rendered as given and no stats are
    produced.
    """
    if not docs:
        raise EmptySelectionError("Please select at least one file to convert")

    to_render = list(docs)
    removed = 0
    if optimize:
        to_render = dedupe(to_render)
        removed = len(docs) - len(to_render)
        if removed:
            logger.info("removed duplicate documents=%d", removed)
        to_render = [normalize_document(d) for d in to_render]

    t0 = time.monotonic()
    fragments = _render_all(to_render, workers)
    rtf = assemble(fragments)
    logger.info("rendered documents=%d took_ms=%d", len(fragments), int((time.monotonic() - t0) * 1000))

    stats = None
    if optimize:
        rtf, stats = optimize_rtf(rtf)

    return ConversionResult(
        rtf=rtf,
        document_count=len(fragments),
        duplicates_removed=removed,
        stats=stats,
    )


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return

    if overrides.get("input_path") is not None:
        cfg.setdefault("input", {})["path"] = overrides["input_path"]

    # Selection
    sel = cfg.setdefault("selection", {})
    if overrides.get("search") is not None:
        sel["search"] = overrides["search"]
    if overrides.get("sort_by") is not None:
        sel["sort_by"] = overrides["sort_by"]
    if overrides.get("descending") is not None:
        sel["descending"] = overrides["descending"]
    if overrides.get("exclude"):
        sel["exclude"] = list(sel.get("exclude") or []) + list(overrides["exclude"])

    # Processing
    processing = cfg.setdefault("processing", {})
    if overrides.get("optimize") is not None:
        processing["optimize"] = overrides["optimize"]
    if overrides.get("workers") is not None:
        processing["workers"] = int(overrides["workers"])  # type: ignore[arg-type]

    # Output
    out = cfg.setdefault("output", {})
    if overrides.get("output_dir") is not None:
        out["dir"] = overrides["output_dir"]
    if overrides.get("filename") is not None:
        out["filename"] = overrides["filename"]
    if overrides.get("write_stats") is not None:
        out["write_stats"] = overrides["write_stats"]


def _select_documents(cfg: Dict[str, Any]) -> List[Document]:
    sel = cfg.get("selection") or {}
    entries = tuple(load_entries(cfg["input"]["path"]))
    entries = library.deselect(entries, sel.get("exclude") or [])
    view = library.project(
        entries,
        search=sel.get("search", ""),
        sort_by=sel.get("sort_by"),
        descending=bool(sel.get("descending", False)),
    )
    chosen = library.selected(view)
    logger.info("selection: entries=%d in_view=%d selected=%d", len(entries), len(view), len(chosen))
    return [e.to_document() for e in chosen]


def _execute_pipeline(cfg: Dict[str, Any], run_id: str, overrides: Optional[Dict[str, Any]] = None) -> List[str]:
    """Execute the conversion with given configuration, return written files."""
    _apply_overrides(cfg, overrides)
    validate_config(cfg)
    logger.info("config loaded input=%s output_dir=%s", cfg["input"]["path"], cfg["output"]["dir"])

    processing = cfg.get("processing") or {}
    docs = _select_documents(cfg)
    result = convert_documents(
        docs,
        optimize=bool(processing.get("optimize", True)),
        workers=int(processing.get("workers", 1)),
    )

    stats = None
    if result.stats is not None:
        stats = result.stats.model_dump(mode="json")
        stats["run_id"] = run_id
        stats["documents"] = result.document_count
        stats["duplicates_removed"] = result.duplicates_removed

    generated_files = write_output(result.rtf, stats, cfg["output"])
    logger.info("output written files=%s", generated_files)
    return generated_files


def run_once(
    config_path: str,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> List[str]:
    """Execute pipeline once with given config file path."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
        return _execute_pipeline(cfg, run_id, overrides)

    except Exception as e:
        logger.error("Pipeline execution failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
