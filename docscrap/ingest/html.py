from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, CData, NavigableString, PageElement, Tag
from soupsieve import SelectorSyntaxError

from docscrap.errors import EmptyDocumentError, ExtractionError, SelectorNotFoundError
from docscrap.ingest.extractor import HEADING_TAGS, SectionExtractor, SectionExtractorConfig
from docscrap.ingest.ids import HeadingIDResolver
from docscrap.models.section import Document, Section

logger = logging.getLogger(__name__)


class HtmlSectionExtractor(SectionExtractor):
    """Split an HTML page into sections bounded by h1-h6 elements."""

    def __init__(self, config: SectionExtractorConfig | None = None) -> None:
        super().__init__(config or SectionExtractorConfig())

    # ------------------------------------------------------------------ public API
    def extract(self, html: str, *, url: str | None = None) -> Document:
        if not html or not html.strip():
            raise EmptyDocumentError("empty html", url=url)

        soup = BeautifulSoup(html, self.config.parser)

        all_ids = [tag["id"] for tag in soup.find_all(id=True) if tag.get("id")]
        anchors_raw: List[str] = []
        anchors: List[str] = []
        for link in soup.find_all("a", href=True):
            href = link["href"]
            if href.startswith("#") and len(href) > 1:
                anchors_raw.append(href)
                anchors.append(href[1:])

        for tag in soup.find_all(list(self.config.skip_tags)):
            tag.decompose()

        headings = soup.find_all(list(HEADING_TAGS))
        resolver = HeadingIDResolver()
        sections: List[Section] = []

        for index, heading in enumerate(headings):
            stop = headings[index + 1] if index + 1 < len(headings) else None
            nodes = list(self._content_span(heading, stop))
            content_html = "".join(_render(node) for node in nodes)
            heading_text = heading.get_text().strip()

            sections.append(
                Section(
                    heading_text=heading_text,
                    heading_html=str(heading),
                    heading_level=int(heading.name[1]),
                    heading_id=resolver.resolve(_raw_heading_id(heading), heading_text),
                    content_html=content_html,
                    content_text="".join(_text(node) for node in nodes).strip(),
                    anchor_targets=list(anchors),
                    content_ids=_collect_ids(nodes),
                )
            )

        logger.debug("Extracted %d sections from %s", len(sections), url or "<html>")
        return Document(
            html=html,
            sections=sections,
            heading_ids=resolver.resolved,
            all_element_ids=all_ids,
            anchor_targets_raw=anchors_raw,
            anchor_targets=anchors,
        )

    # ------------------------------------------------------------------ content span
    def _content_span(self, heading: Tag, stop: Optional[Tag]) -> Iterator[PageElement]:
        """Yield the nodes between ``heading`` and ``stop`` in document order.

        The walk leaves the heading's parent when its siblings run out, so
        headings wrapped in their own container still collect the content that
        follows the container. An element that holds the next heading is entered
        rather than taken whole.
        """

        if stop is not None and _is_descendant(stop, heading):
            return
        node = _next_after_subtree(heading)
        while node is not None and node is not stop:
            if isinstance(node, Tag):
                if node.name in HEADING_TAGS:
                    return
                if stop is not None and _is_descendant(stop, node):
                    node = node.contents[0]
                    continue
            yield node
            node = _next_after_subtree(node)


def _raw_heading_id(heading: Tag) -> str:
    own = heading.get("id")
    if own:
        return own
    child = heading.find(id=True)
    if child is not None and child.get("id"):
        return child["id"]
    return ""


def _next_after_subtree(node: PageElement) -> Optional[PageElement]:
    while node is not None:
        if node.next_sibling is not None:
            return node.next_sibling
        node = node.parent
    return None


def _is_descendant(node: PageElement, ancestor: Tag) -> bool:
    return any(parent is ancestor for parent in node.parents)


def _render(node: PageElement) -> str:
    if isinstance(node, Tag):
        return str(node)
    return node.output_ready(formatter="minimal")


def _text(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.get_text()
    if type(node) is NavigableString or isinstance(node, CData):
        return str(node)
    return ""


def _collect_ids(nodes: List[PageElement]) -> List[str]:
    ids: List[str] = []
    seen = set()
    for node in nodes:
        if not isinstance(node, Tag):
            continue
        candidates = [node] + node.find_all(id=True)
        for tag in candidates:
            value = tag.get("id")
            if value and value not in seen:
                seen.add(value)
                ids.append(value)
    return ids


# ---------------------------------------------------------------------- selectors
def extract_by_selector(html: str, selector: str | None, *, url: str | None = None) -> str:
    """Return the outer HTML of the first element matching ``selector``."""

    if not selector or not selector.strip():
        return html
    soup = BeautifulSoup(html, "html.parser")
    try:
        match = soup.select_one(selector)
    except SelectorSyntaxError as exc:
        raise ExtractionError(f"invalid selector: {exc}", url=url, selector=selector) from exc
    if match is None:
        raise SelectorNotFoundError("selector not found", url=url, selector=selector)
    return str(match)


def remove_selectors(soup: BeautifulSoup, selector: str | None) -> int:
    """Remove every element matching ``selector`` and return how many were dropped."""

    if not selector or not selector.strip():
        return 0
    try:
        matches = soup.select(selector)
    except SelectorSyntaxError as exc:
        raise ExtractionError(f"invalid selector: {exc}", selector=selector) from exc
    for tag in matches:
        tag.decompose()
    return len(matches)


def apply_exclusions(html: str, selector: str | None) -> str:
    if not selector or not selector.strip():
        return html
    soup = BeautifulSoup(html, "html.parser")
    removed = remove_selectors(soup, selector)
    logger.debug("Removed %d elements matching %r", removed, selector)
    return str(soup)


def parse_documents(
    html: str,
    content_selector: str | None = None,
    *,
    extractor: SectionExtractor | None = None,
    url: str | None = None,
) -> Document:
    """Parse a page, preferring the sections inside ``content_selector``.

    Falls back to the full page when the selector matches nothing or the content
    root has no headings. The content document keeps the full page's IDs and
    anchors so menu stitching and completeness checks see the whole page.
    """

    extractor = extractor or HtmlSectionExtractor()
    full_doc = extractor.extract(html, url=url)
    if not content_selector or not content_selector.strip():
        return full_doc

    try:
        content_html = extract_by_selector(html, content_selector, url=url)
    except SelectorNotFoundError as exc:
        logger.warning("%s; using the full page", exc)
        return full_doc

    content_doc = extractor.extract(content_html, url=url)
    if not content_doc.sections:
        logger.info("No headings inside %r; using the full page", content_selector)
        return full_doc

    content_doc.heading_ids = full_doc.heading_ids
    content_doc.anchor_targets = full_doc.anchor_targets
    content_doc.anchor_targets_raw = full_doc.anchor_targets_raw
    content_doc.all_element_ids = full_doc.all_element_ids
    return content_doc


__all__ = [
    "HtmlSectionExtractor",
    "apply_exclusions",
    "extract_by_selector",
    "parse_documents",
    "remove_selectors",
]
