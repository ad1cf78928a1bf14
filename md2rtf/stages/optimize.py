from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass

from md2rtf.models import OptimizationStats
from md2rtf.utils import byte_size, get_logger

logger = get_logger(__name__)

Replacement = t.Union[str, t.Callable[["re.Match[str]"], str]]

# Control words that emit content or structure; a group holding one of them is never empty
_CONTENT_WORDS = {
    "par", "page", "line", "tab", "bullet", "sect", "cell", "row",
    "emdash", "endash", "emspace", "enspace",
    "lquote", "rquote", "ldblquote", "rdblquote", "rtf",
}

_CONTROL_WORD = re.compile(r"\\([A-Za-z]+)(-?\d+)?")
_CONTROL_WORD_TAIL = re.compile(r"\\[A-Za-z]+-?\d*\Z")
_FONT_SIZE = re.compile(r"\\fs\d+")


@dataclass(frozen=True)
class RewriteRule:
    name: str
    pattern: "re.Pattern[str]"
    replacement: Replacement

    def apply(self, text: str) -> t.Tuple[str, int]:
        repl = self.replacement
        if isinstance(repl, str):
            literal = repl
            return self.pattern.subn(lambda _m: literal, text)
        return self.pattern.subn(repl, text)


def _removed_group(m: "re.Match[str]") -> str:
    """Replacement for a dropped group that keeps the previous control word delimited.

    ``\\b{}x`` must become ``\\b x``, not ``\\bx``.
    """
    s = m.string
    start, end = m.start(), m.end()
    if end < len(s) and s[end] not in "\\{}" and _CONTROL_WORD_TAIL.search(s, max(0, start - 40), start):
        return " "
    return ""


def _keep_text_space(default: str) -> t.Callable[["re.Match[str]"], str]:
    """Whitespace replacement that keeps a text space behind a control word.

    In ``{\\i  }`` the first space ends ``\\i`` and the second is visible text.
    """

    def repl(m: "re.Match[str]") -> str:
        run, start = m.group(0), m.start()
        if (
            run[0] == " "
            and (" " in run[1:] or "\t" in run[1:])
            and _CONTROL_WORD_TAIL.search(m.string, max(0, start - 40), start)
        ):
            return "  "
        return default

    return repl


def _drop_formatting_only_group(m: "re.Match[str]") -> str:
    words = {w.group(1) for w in _CONTROL_WORD.finditer(m.group(1))}
    if words & _CONTENT_WORDS:
        return m.group(0)
    return _removed_group(m)


def _last_font_size(m: "re.Match[str]") -> str:
    return _FONT_SIZE.findall(m.group(0))[-1]


_PAR_RUN = re.compile(r"\\par(?![A-Za-z])(?:\s*\\par(?![A-Za-z])){2,}")

RULES: t.Tuple[RewriteRule, ...] = (
    RewriteRule("collapse_par_runs", _PAR_RUN, "\\par\\par"),
    RewriteRule("collapse_whitespace", re.compile(r"\s+"), _keep_text_space(" ")),
    # a space before text is the \par delimiter and has to stay
    RewriteRule("strip_after_par", re.compile(r"\\par(?![A-Za-z])\s+(?=[\\{}]|\Z)"), "\\par"),
    RewriteRule("canonicalize_par_aliases", re.compile(r"\\(?:paragraph|line)(?![A-Za-z])"), "\\par"),
    RewriteRule("collapse_plain_resets", re.compile(r"\\plain(?![A-Za-z])(?:\s?\\plain(?![A-Za-z]))+"), "\\plain"),
    RewriteRule(
        "collapse_bold_toggle",
        re.compile(r"(?:\\b(?![A-Za-z0-9])\s?)?\\b0(?![0-9])\s?\\b(?![A-Za-z0-9])"),
        "\\b",
    ),
    RewriteRule(
        "collapse_font_repeats",
        re.compile(r"\\f([01])(?![0-9])(?:\s?\\f\1(?![0-9]))+"),
        lambda m: "\\f" + m.group(1),
    ),
    RewriteRule("collapse_par_runs_again", _PAR_RUN, "\\par\\par"),
    RewriteRule("strip_before_control", re.compile(r"\s+(?=\\)"), _keep_text_space("")),
    RewriteRule("normalize_bullet_space", re.compile(r"\\bullet(?![A-Za-z])\s+"), "\\bullet "),
    RewriteRule("drop_empty_groups", re.compile(r"\{\}"), _removed_group),
    RewriteRule(
        "drop_formatting_only_groups",
        re.compile(r"\{((?:\\[A-Za-z]+-?\d*\s?)+)\}"),
        _drop_formatting_only_group,
    ),
    RewriteRule("collapse_font_sizes", re.compile(r"\\fs\d+(?:\s?\\fs\d+)+"), _last_font_size),
    RewriteRule("strip_inside_braces", re.compile(r"\s+(?=\})|(?<=\{)\s+"), _keep_text_space("")),
)


def compute_stats(original_size: int, optimized_size: int) -> OptimizationStats:
    if original_size == 0:
        reduction = 0.0
    else:
        reduction = round((original_size - optimized_size) / original_size * 100, 2)
    return OptimizationStats(
        original_size=original_size,
        optimized_size=optimized_size,
        reduction_percent=reduction,
    )


def optimize(rtf: str, rules: t.Sequence[RewriteRule] = RULES) -> t.Tuple[str, OptimizationStats]:
    """Shrink an assembled RTF document without changing what it renders.

    Rules run once each, in order; later rules rely on the whitespace
    normalization done by earlier ones. Must run on the whole document,
    never per fragment.
    """
    optimized = rtf or ""
    for rule in rules:
        optimized, n = rule.apply(optimized)
        if n:
            logger.debug("optimize.rule: name=%s replaced=%d", rule.name, n)

    stats = compute_stats(byte_size(rtf), byte_size(optimized))
    logger.info(
        "optimize: original=%d optimized=%d reduction=%.2f%%",
        stats.original_size,
        stats.optimized_size,
        stats.reduction_percent,
    )
    return optimized, stats
