from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(slots=True)
class IndexRecord:
    """One retrieval-index entry per section, written to ``index.jsonl``."""

    id: str
    url: str
    source_url: str
    heading: str
    heading_level: int
    heading_path: str
    content: str
    token_estimate: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["IndexRecord"]
