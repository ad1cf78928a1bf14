from md2rtf.rendering.rtf import LineKind, assemble, classify, render, render_line


def test_heading_levels():
    assert render("# Title") == "{\\b\\fs24 Title}\\par\\par\n\\par\\par"
    assert render("## Title") == "{\\b\\fs20 Title}\\par\\par\n\\par\\par"
    assert render("### Title") == "{\\b\\fs18 Title}\\par\\par\n\\par\\par"


def test_bold_branch_wins_over_italic():
    assert classify("**bold** and *italic*") is LineKind.BOLD_SPAN
    assert render_line("**bold** and *italic*") == "{\\b bold} and *italic*\\par"


def test_italic_span():
    assert render_line("an *em* word") == "an {\\i em} word\\par"


def test_code_fence_uses_mono_font():
    assert render_line("```python") == "{\\f1\\fs16 ```python}\\par"


def test_list_items():
    assert render_line("- item") == "\\bullet item\\par"
    assert render_line("12. twelfth") == "12. twelfth\\par"
    assert classify("12. twelfth") is LineKind.ORDERED_ITEM
    # a lone star is tested for italics before bullets
    assert classify("* item") is LineKind.ITALIC_SPAN
    assert render_line("* item") == "* item\\par"


def test_blank_and_plain_lines():
    assert render_line("") == "\\par"
    assert render_line("   just text  ") == "just text\\par"
    assert classify("just text") is LineKind.PLAIN
    assert classify("#hashtag") is LineKind.PLAIN


def test_title_and_trailing_breaks():
    out = render("Body", "Doc")
    assert out.startswith("{\\b\\fs28 Doc}\\par\\par\n")
    assert out.endswith("\\par\\par")
    assert "Body\\par" in out


def test_empty_document_renders_title_only():
    assert render("", "Empty") == "{\\b\\fs28 Empty}\\par\\par\n\\par\\par"
    assert render("") == "\\par\\par"


def test_assemble_document_layout():
    rtf = assemble(["A\\par\\par", "B\\par\\par"])
    assert rtf.startswith("{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times New Roman;}{\\f1 Courier New;}}\\f0\\fs24")
    assert "{\\b\\fs32 Combined Markdown Document}\\par\\par" in rtf
    assert "{\\i Generated from 2 selected markdown files}\\par\\par\\par" in rtf
    assert rtf.count("\\page") == 1
    assert rtf.index("A\\par") < rtf.index("\\page") < rtf.index("B\\par")
    assert rtf.endswith("B\\par\\par}")
