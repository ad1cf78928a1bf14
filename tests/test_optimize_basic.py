import re

import pytest

from md2rtf.rendering.rtf import assemble, render, render_line
from md2rtf.stages.normalize import normalize
from md2rtf.stages.optimize import RULES, compute_stats, optimize


def _words(rtf: str):
    text = re.sub(r"\\[A-Za-z]+-?\d* ?", " ", rtf)
    return text.replace("{", "").replace("}", "").split()


def _control_words(rtf: str):
    return set(re.findall(r"\\([A-Za-z]+)", rtf))


def test_rules_run_in_fixed_order():
    assert [r.name for r in RULES] == [
        "collapse_par_runs",
        "collapse_whitespace",
        "strip_after_par",
        "canonicalize_par_aliases",
        "collapse_plain_resets",
        "collapse_bold_toggle",
        "collapse_font_repeats",
        "collapse_par_runs_again",
        "strip_before_control",
        "normalize_bullet_space",
        "drop_empty_groups",
        "drop_formatting_only_groups",
        "collapse_font_sizes",
        "strip_inside_braces",
    ]


@pytest.mark.parametrize(
    "src,expected",
    [
        ("\\par\\par\\par\\par", "\\par\\par"),
        ("x\\par\n\\par \n\\par\\pard", "x\\par\\par\\pard"),
        ("Hello\\par\nWorld", "Hello\\par World"),
        ("a\\par\n1. one", "a\\par 1. one"),
        ("a\\line b", "a\\par b"),
        ("a\\paragraph b", "a\\par b"),
        ("a\\linex b", "a\\linex b"),
        ("\\plain\\plain\\plain x", "\\plain x"),
        ("{\\b\\b0\\b x}", "{\\b x}"),
        ("{\\b0 \\b x}", "{\\b x}"),
        ("\\f0\\f0 x", "\\f0 x"),
        ("\\f1 \\f1\\f1 y", "\\f1 y"),
        ("{}a", "a"),
        ("\\b{}x", "\\b x"),
        ("{\\b }text", "text"),
        ("{\\i\\fs20}text", "text"),
        ("a{\\page}b", "a{\\page}b"),
        ("\\fs20\\fs16 x", "\\fs16 x"),
        ("{ \\b x }", "{\\b x}"),
        ("\\bullet    item", "\\bullet item"),
        ("1{\\i  }1", "1{\\i  }1"),
        ("\\b  x", "\\b  x"),
        ("word \\par", "word\\par"),
    ],
)
def test_single_rewrites(src, expected):
    out, _ = optimize(src)
    assert out == expected


def test_size_accounting():
    stats = compute_stats(1000, 850)
    assert stats.reduction_percent == 15.0
    assert stats.original_size == 1000
    assert stats.optimized_size == 850


def test_zero_size_input_has_zero_reduction():
    out, stats = optimize("")
    assert out == ""
    assert stats.reduction_percent == 0.0


def test_sizes_are_utf8_bytes():
    src = "{\\b caf\u00e9}\\par\\par\\par"
    out, stats = optimize(src)
    assert stats.original_size == len(src.encode("utf-8"))
    assert stats.optimized_size == len(out.encode("utf-8"))
    assert stats.optimized_size < stats.original_size


def test_optimizer_keeps_rendered_content():
    docs = [
        ("guide", "# Guide\n\nIntro   text with **bold** and *italic*.\n\n\n\n## Steps\n- one\n- two\n1. first\n2. second"),
        ("code", "```python\nx  =  1\n```\n\n    indented   code\n### Small\nplain"),
        ("empty", ""),
    ]
    fragments = [render(normalize(content), name) for name, content in docs]
    rtf = assemble(fragments)
    out, stats = optimize(rtf)

    assert _words(out) == _words(rtf)
    assert _control_words(out) <= _control_words(rtf)
    assert out.count("\\page") == 2
    assert out.startswith("{\\rtf1")
    assert out.endswith("}")
    assert stats.optimized_size < stats.original_size
    # \par never fuses with following text
    assert not re.search(r"\\par[A-Za-z0-9]", out.replace("\\pard", ""))


def test_space_only_italic_keeps_its_text_space():
    line = render_line("1* *1")
    assert line == "1{\\i  }1\\par"
    out, _ = optimize(line)
    # first space ends \i, second one is the rendered space between the digits
    assert out == "1{\\i  }1\\par"
