"""Exception hierarchy for page extraction and output writing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docscrap.models.report import CompletenessReport


class DocscrapError(Exception):
    """Base class for every error raised by docscrap."""


class ExtractionError(DocscrapError):
    """Structural failure while reading a page.

    Attributes:
        url: Page the HTML came from, when known.
        selector: CSS selector involved in the failure, when any.
    """

    def __init__(self, message: str, *, url: str | None = None, selector: str | None = None) -> None:
        self.message = message
        self.url = url
        self.selector = selector
        context = []
        if selector:
            context.append(f"selector={selector!r}")
        if url:
            context.append(f"url={url}")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(f"{message}{suffix}")


class EmptyDocumentError(ExtractionError):
    """Raised when the HTML input is blank."""


class SelectorNotFoundError(ExtractionError):
    """Raised when a CSS selector matches nothing."""


class FetchError(DocscrapError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class CompletenessError(DocscrapError):
    """Raised in strict mode when the completeness report lists issues."""

    def __init__(self, report: "CompletenessReport") -> None:
        self.report = report
        counts = ", ".join(f"{name}={count}" for name, count in report.counts().items() if count)
        super().__init__(f"completeness checks failed ({counts}); disable strict mode to allow")


__all__ = [
    "CompletenessError",
    "DocscrapError",
    "EmptyDocumentError",
    "ExtractionError",
    "FetchError",
    "SelectorNotFoundError",
]
