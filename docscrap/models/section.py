from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Section:
    """A heading element plus everything up to the next heading at any level."""

    heading_text: str
    heading_html: str
    heading_level: int
    heading_id: str
    content_html: str
    content_text: str
    anchor_targets: List[str] = field(default_factory=list)
    content_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "heading_text": self.heading_text,
            "heading_html": self.heading_html,
            "heading_level": self.heading_level,
            "heading_id": self.heading_id,
            "content_html": self.content_html,
            "content_text": self.content_text,
            "anchor_targets": list(self.anchor_targets),
            "content_ids": list(self.content_ids),
        }


@dataclass(slots=True)
class Document:
    """Parse result for one page or content root."""

    html: str
    sections: List[Section] = field(default_factory=list)
    heading_ids: List[str] = field(default_factory=list)
    all_element_ids: List[str] = field(default_factory=list)
    anchor_targets_raw: List[str] = field(default_factory=list)
    anchor_targets: List[str] = field(default_factory=list)

    def trim(self, max_sections: int) -> None:
        """Keep only the first ``max_sections`` sections (0 keeps everything)."""

        if 0 < max_sections < len(self.sections):
            self.sections = self.sections[:max_sections]


@dataclass(slots=True)
class SectionMarkdown:
    """Rendered Markdown for one section plus the IDs it can be linked by."""

    heading_id: str
    content_ids: List[str]
    markdown: str


__all__ = ["Document", "Section", "SectionMarkdown"]
