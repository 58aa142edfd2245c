from __future__ import annotations

from typing import List, Set

from docscrap.ingest.utils import slugify_heading


class HeadingIDResolver:
    """Assigns per-document unique heading identifiers.

    One resolver belongs to one document walk; collisions get ``_2``, ``_3``...
    suffixes in the order they are seen. Empty identifiers pass through untouched
    so the completeness report can flag them.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._ordered: List[str] = []

    @property
    def resolved(self) -> List[str]:
        return list(self._ordered)

    def resolve(self, raw_id: str, heading_text: str) -> str:
        candidate = raw_id or slugify_heading(heading_text)
        return self.dedupe(candidate)

    def dedupe(self, candidate: str) -> str:
        if not candidate:
            return ""
        resolved = candidate
        suffix = 2
        while resolved in self._seen:
            resolved = f"{candidate}_{suffix}"
            suffix += 1
        self._seen.add(resolved)
        self._ordered.append(resolved)
        return resolved


__all__ = ["HeadingIDResolver"]
