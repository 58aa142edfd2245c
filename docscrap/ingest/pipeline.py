from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from docscrap.errors import CompletenessError, DocscrapError
from docscrap.ingest.extractor import SectionExtractor
from docscrap.ingest.fetch import FetchResult, fetch_page
from docscrap.ingest.html import HtmlSectionExtractor, apply_exclusions, parse_documents
from docscrap.ingest.markdown import MarkdownRenderer
from docscrap.ingest.menu import extract_menu
from docscrap.ingest.report import analyze
from docscrap.ingest.utils import url_to_output_dir
from docscrap.models.configs import ScrapeConfig
from docscrap.models.report import CompletenessReport
from docscrap.models.section import Document, Section, SectionMarkdown
from docscrap.output.index import build_index_records, write_index
from docscrap.output.storage import SQLiteIndexStore
from docscrap.output.writer import (
    map_markdown_by_id,
    write_json,
    write_markdown,
    write_markdown_parts,
    write_menu,
    write_section_files,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[..., FetchResult]


@dataclass(slots=True)
class AnalysisResult:
    """Sections and completeness report for one page."""

    page_html: str
    document: Document
    report: CompletenessReport

    def trim(self, max_sections: int) -> None:
        self.document.trim(max_sections)


@dataclass(slots=True)
class WriteResult:
    """Paths produced by writing one page."""

    output_dir: Path
    markdown_path: Path
    json_path: Path
    menu_path: Optional[Path] = None
    index_path: Optional[Path] = None
    section_files: List[Path] = field(default_factory=list)
    records_stored: int = 0


@dataclass(slots=True)
class PageSummary:
    """Outcome of processing one URL."""

    url: str
    output_dir: Path
    sections: int = 0
    processed: bool = False
    error: Optional[str] = None
    result: Optional[WriteResult] = None


class ScrapePipeline:
    """Coordinates fetching, sectioning, rendering, and writing of pages."""

    def __init__(
        self,
        config: ScrapeConfig,
        *,
        extractor: Optional[SectionExtractor] = None,
        renderer: Optional[MarkdownRenderer] = None,
        fetcher: Fetcher = fetch_page,
        index_store: Optional[SQLiteIndexStore] = None,
    ) -> None:
        self.config = config
        self.extractor = extractor or HtmlSectionExtractor()
        self.renderer = renderer or MarkdownRenderer()
        self.fetcher = fetcher
        self.index_store = index_store

    def analyze(self, html: str, url: str | None = None) -> AnalysisResult:
        page_html = apply_exclusions(html, self.config.exclude_selector)
        document = parse_documents(
            page_html,
            self.config.content_selector,
            extractor=self.extractor,
            url=url,
        )
        return AnalysisResult(page_html=page_html, document=document, report=analyze(document))

    def render(self, sections: Iterable[Section]) -> Tuple[str, List[SectionMarkdown]]:
        """Render every section; returns the full page Markdown and the per-section pieces."""

        pieces: List[str] = []
        rendered: List[SectionMarkdown] = []
        for section in sections:
            markdown = self.renderer.section_to_markdown(
                section.heading_text,
                section.heading_level,
                section.content_html,
            )
            if not markdown.endswith("\n"):
                markdown += "\n"
            pieces.append(markdown + "\n")
            rendered.append(
                SectionMarkdown(
                    heading_id=section.heading_id,
                    content_ids=list(section.content_ids),
                    markdown=markdown,
                )
            )
        return "".join(pieces), rendered

    def write(self, result: AnalysisResult, output_dir: Path, url: str = "") -> WriteResult:
        if self.config.strict and result.report.has_issues:
            raise CompletenessError(result.report)

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        document = result.document

        json_path = write_json(document, result.report, output_dir)
        markdown, rendered = self.render(document.sections)
        limits = self.config.chunk_limits()
        if limits.enabled:
            markdown_path = write_markdown_parts(output_dir, [item.markdown for item in rendered], limits)
        else:
            markdown_path = write_markdown(output_dir, markdown)

        written = WriteResult(output_dir=output_dir, markdown_path=markdown_path, json_path=json_path)

        if self.config.nav_selector and self.config.nav_selector.strip():
            nodes = extract_menu(result.page_html, self.config.nav_selector)
            written.menu_path = write_menu(output_dir, nodes)
            written.section_files = write_section_files(
                output_dir,
                nodes,
                map_markdown_by_id(rendered),
                limits,
                max_items=self.config.max_menu_items,
            )

        if self.config.write_index:
            written.index_path = write_index(output_dir, url, document.sections)

        if self.index_store is not None:
            self.index_store.initialize()
            # Sections dropped from the page since the last run must not linger.
            self.index_store.delete_url(url)
            written.records_stored = self.index_store.upsert_records(
                build_index_records(document.sections, url)
            )

        logger.info("Wrote %s (%d sections)", output_dir, len(document.sections))
        return written

    def process_page(self, url: str, output_dir: Path) -> Tuple[AnalysisResult, WriteResult]:
        fetched = self.fetcher(
            url,
            timeout=self.config.timeout_seconds,
            user_agent=self.config.user_agent,
        )
        logger.info("Fetch mode for %s: %s", url, fetched.source_info)
        result = self.analyze(fetched.html, url=url)
        result.trim(self.config.max_sections)
        if result.report.has_issues:
            logger.warning("Completeness issues for %s: %s", url, result.report.counts())
        return result, self.write(result, output_dir, url=url)

    def run(self, urls: Optional[Sequence[str]] = None) -> List[PageSummary]:
        """Process every URL; with several URLs each page gets its own directory under ``pages/``."""

        targets = list(urls if urls is not None else self.config.urls)
        if not targets:
            raise ValueError("at least one URL is required")

        output_root = Path(self.config.output_dir)
        summaries: List[PageSummary] = []
        for url in targets:
            if len(targets) == 1:
                page_dir = output_root
            else:
                page_dir = url_to_output_dir(url, output_root / "pages")
            summary = PageSummary(url=url, output_dir=page_dir)
            try:
                result, written = self.process_page(url, page_dir)
            except (DocscrapError, OSError) as exc:
                if len(targets) == 1:
                    raise
                logger.warning("Failed to process %s: %s", url, exc)
                summary.error = str(exc)
            else:
                summary.sections = len(result.document.sections)
                summary.processed = True
                summary.result = written
            summaries.append(summary)
        return summaries


__all__ = ["AnalysisResult", "PageSummary", "ScrapePipeline", "WriteResult"]
