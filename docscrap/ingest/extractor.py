from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Tuple

from docscrap.models.section import Document


HEADING_TAGS: Tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")


@dataclass(slots=True)
class SectionExtractorConfig:
    """Configuration for splitting pages into heading-bounded sections."""

    skip_tags: Tuple[str, ...] = ("script", "style", "noscript")
    parser: str = "html.parser"


class SectionExtractor(ABC):
    """Abstract base class for turning HTML into an ordered list of sections."""

    def __init__(self, config: SectionExtractorConfig | None = None) -> None:
        self.config = config or SectionExtractorConfig()

    @abstractmethod
    def extract(self, html: str, *, url: str | None = None) -> Document:
        """Parse a single page and return its Document."""

    def extract_many(self, pages: Iterable[str]) -> Iterable[Document]:
        """Utility for parsing multiple pages."""

        for html in pages:
            yield self.extract(html)


__all__ = ["HEADING_TAGS", "SectionExtractor", "SectionExtractorConfig"]
