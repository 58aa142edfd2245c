"""HTML-side helpers: sectioning, IDs, menus, reports, rendering, fetching."""

from .extractor import HEADING_TAGS, SectionExtractor, SectionExtractorConfig
from .html import HtmlSectionExtractor, apply_exclusions, extract_by_selector, parse_documents, remove_selectors
from .ids import HeadingIDResolver
from .markdown import MarkdownRenderer, MarkdownRendererConfig
from .menu import anchor_from_href, extract_menu
from .report import analyze
from .utils import slugify, slugify_heading

__all__ = [
    "HEADING_TAGS",
    "HeadingIDResolver",
    "HtmlSectionExtractor",
    "MarkdownRenderer",
    "MarkdownRendererConfig",
    "SectionExtractor",
    "SectionExtractorConfig",
    "analyze",
    "anchor_from_href",
    "apply_exclusions",
    "extract_by_selector",
    "extract_menu",
    "parse_documents",
    "remove_selectors",
    "slugify",
    "slugify_heading",
]
