from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class CompletenessReport:
    """Structural issues found while sectioning a page."""

    missing_heading_ids: List[str] = field(default_factory=list)
    duplicate_ids: List[str] = field(default_factory=list)
    broken_anchors: List[str] = field(default_factory=list)
    empty_sections: List[str] = field(default_factory=list)
    heading_gaps: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(
            self.missing_heading_ids
            or self.duplicate_ids
            or self.broken_anchors
            or self.empty_sections
            or self.heading_gaps
        )

    def counts(self) -> Dict[str, int]:
        return {name: len(values) for name, values in self.to_dict().items()}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["CompletenessReport"]
