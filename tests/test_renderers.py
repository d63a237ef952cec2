from showsite.renderers import MarkdownRenderer


def test_heading_renders_without_id():
    html = MarkdownRenderer().render(b"# Hi\n")
    assert html.strip() == "<h1>Hi</h1>"


def test_paragraph_and_emphasis():
    html = MarkdownRenderer().render(b"Hello *there* and **you**\n")
    assert "<p>Hello <em>there</em> and <strong>you</strong></p>" in html


def test_tables_are_not_rendered():
    source = b"| a | b |\n|---|---|\n| 1 | 2 |\n"
    html = MarkdownRenderer().render(source)
    assert "<table" not in html


def test_strikethrough_and_bare_urls_stay_text():
    html = MarkdownRenderer().render(b"~~gone~~ see https://example.com\n")
    assert "<del>" not in html
    assert "<a " not in html
    assert "~~gone~~" in html


def test_footnotes_are_not_rendered():
    html = MarkdownRenderer().render(b"Text[^1]\n\n[^1]: Note\n")
    assert "footnote" not in html


def test_raw_html_passes_through():
    html = MarkdownRenderer().render(b'<div class="player">embed</div>\n')
    assert '<div class="player">embed</div>' in html


def test_invalid_utf8_is_replaced():
    html = MarkdownRenderer().render(b"bad \xff byte\n")
    assert "�" in html


def test_output_is_deterministic():
    renderer = MarkdownRenderer()
    source = b"# Title\n\n- one\n- two\n"
    first = renderer.render(source)
    renderer.render(b"# Something else entirely\n")
    assert renderer.render(source) == first
    assert MarkdownRenderer().render(source) == first
