from __future__ import annotations

from collections import Counter
from typing import Iterable, List

from docscrap.models.report import CompletenessReport
from docscrap.models.section import Document


def analyze(document: Document) -> CompletenessReport:
    """Collect structural issues: missing IDs, duplicates, broken anchors, empty sections, level gaps."""

    missing: List[str] = []
    empty: List[str] = []
    gaps: List[str] = []

    for section in document.sections:
        if not section.heading_id:
            missing.append(section.heading_text)
        if not section.content_text:
            empty.append(section.heading_text)

    if len(document.sections) > 1:
        previous = document.sections[0].heading_level
        for section in document.sections[1:]:
            current = section.heading_level
            if previous > 0 and current - previous > 1:
                gaps.append(section.heading_text)
            if current > 0:
                previous = current

    return CompletenessReport(
        missing_heading_ids=sorted(missing),
        duplicate_ids=sorted(_duplicates(document.all_element_ids)),
        broken_anchors=sorted(_broken_anchors(document.anchor_targets, document.all_element_ids)),
        empty_sections=sorted(empty),
        heading_gaps=sorted(gaps),
    )


def _duplicates(ids: Iterable[str]) -> List[str]:
    counts = Counter(value for value in ids if value)
    return [value for value, count in counts.items() if count > 1]


def _broken_anchors(anchors: Iterable[str], ids: Iterable[str]) -> List[str]:
    known = {value for value in ids if value}
    return [anchor for anchor in anchors if anchor and anchor not in known]


__all__ = ["analyze"]
