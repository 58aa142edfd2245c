from docscrap.ingest.markdown import MarkdownRenderer, MarkdownRendererConfig


def test_section_to_markdown_prefixes_heading_level():
    renderer = MarkdownRenderer()

    markdown = renderer.section_to_markdown("Intro", 2, "<p>Hello <strong>world</strong></p>")

    assert markdown == "## Intro\n\nHello **world**\n"


def test_section_without_content_is_heading_only():
    assert MarkdownRenderer().section_to_markdown("Empty", 3, "  ") == "### Empty\n"


def test_links_and_lists_are_converted():
    html = '<p>See <a href="https://example.com/">the site</a>.</p><ul><li>one</li><li>two</li></ul>'

    markdown = MarkdownRenderer().convert(html)

    assert "[the site](https://example.com/)" in markdown
    assert "* one" in markdown
    assert "* two" in markdown


def test_ignore_links_option():
    renderer = MarkdownRenderer(MarkdownRendererConfig(ignore_links=True))

    markdown = renderer.convert('<p><a href="https://example.com/">plain</a></p>')

    assert "plain" in markdown
    assert "https://example.com/" not in markdown


def test_long_lines_are_not_wrapped():
    text = " ".join(["word"] * 60)

    markdown = MarkdownRenderer().convert(f"<p>{text}</p>")

    assert text in markdown
