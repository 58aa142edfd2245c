from __future__ import annotations

from dataclasses import dataclass

import html2text


@dataclass(slots=True)
class MarkdownRendererConfig:
    """Options passed through to html2text."""

    body_width: int = 0
    ignore_images: bool = False
    ignore_links: bool = False
    unicode_snob: bool = True


class MarkdownRenderer:
    """Render one section (heading plus content HTML) as Markdown."""

    def __init__(self, config: MarkdownRendererConfig | None = None) -> None:
        self.config = config or MarkdownRendererConfig()

    def _converter(self) -> html2text.HTML2Text:
        converter = html2text.HTML2Text()
        converter.body_width = self.config.body_width
        converter.ignore_images = self.config.ignore_images
        converter.ignore_links = self.config.ignore_links
        converter.unicode_snob = self.config.unicode_snob
        return converter

    def convert(self, html: str) -> str:
        # HTML2Text keeps state between feeds, so each call gets a fresh instance.
        return self._converter().handle(html)

    def section_to_markdown(self, heading_text: str, heading_level: int, content_html: str) -> str:
        heading_line = ("#" * max(heading_level, 1) + " " + heading_text).strip()
        body = self.convert(content_html).strip() if content_html.strip() else ""
        if not body:
            return heading_line + "\n"
        return heading_line + "\n\n" + body + "\n"


__all__ = ["MarkdownRenderer", "MarkdownRendererConfig"]
