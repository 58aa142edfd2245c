from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List

from docscrap.models.record import IndexRecord
from docscrap.models.section import Section

logger = logging.getLogger(__name__)

INDEX_FILE = "index.jsonl"
HEADING_PATH_SEPARATOR = " > "


class HeadingTrail:
    """Tracks the active heading at each level while sections are walked in order."""

    def __init__(self) -> None:
        self._levels: Dict[int, str] = {}

    def push(self, level: int, text: str) -> str:
        """Record a heading and return the breadcrumb that is active after it."""

        self._levels[level] = text
        for deeper in [key for key in self._levels if key > level]:
            del self._levels[deeper]
        return HEADING_PATH_SEPARATOR.join(
            self._levels[depth] for depth in range(1, 7) if depth in self._levels
        )


def stable_section_id(base_url: str, heading_path: str, heading_id: str) -> str:
    raw = f"{base_url}|{heading_path}|{heading_id}"
    return hashlib.sha256(raw.encode("utf-8", errors="surrogatepass")).hexdigest()[:16]


def build_index_records(sections: Iterable[Section], base_url: str) -> List[IndexRecord]:
    """Create one retrieval record per section, in section order.

    ``token_estimate`` is the UTF-8 length of the section's content HTML divided
    by four. It counts markup too and is only a rough size hint.
    """

    trail = HeadingTrail()
    records: List[IndexRecord] = []
    for section in sections:
        heading_path = trail.push(section.heading_level, section.heading_text)
        records.append(
            IndexRecord(
                id=stable_section_id(base_url, heading_path, section.heading_id),
                url=base_url,
                source_url=f"{base_url}#{section.heading_id}",
                heading=section.heading_text,
                heading_level=section.heading_level,
                heading_path=heading_path,
                content=section.content_html.strip(),
                token_estimate=len(section.content_html.encode("utf-8", errors="surrogatepass")) // 4,
            )
        )
    return records


def write_index(output_dir: Path, base_url: str, sections: Iterable[Section]) -> Path:
    """Write ``index.jsonl``; records that fail to serialize are logged and skipped.

    Lines are UTF-8 JSON with non-ASCII text and ``<``, ``>``, ``&`` written
    literally, not as ``\\uXXXX`` escapes.
    """

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / INDEX_FILE

    written = 0
    with path.open("wb") as handle:
        for record in build_index_records(sections, base_url):
            try:
                line = json.dumps(record.to_dict(), ensure_ascii=False).encode("utf-8")
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping index record %r: %s", record.heading, exc)
                continue
            handle.write(line + b"\n")
            written += 1

    logger.info("Wrote %d index records to %s", written, path)
    return path


__all__ = ["HeadingTrail", "INDEX_FILE", "build_index_records", "stable_section_id", "write_index"]
