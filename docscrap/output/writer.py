from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

from docscrap.ingest.utils import slugify
from docscrap.models.menu import MenuNode
from docscrap.models.report import CompletenessReport
from docscrap.models.section import Document, SectionMarkdown
from docscrap.output.chunker import ChunkLimits, bundle_parts
from docscrap.output.splitter import first_heading_line, split_markdown_by_headings

logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_FILE = "content.md"
DEFAULT_JSON_FILE = "content.json"
MENU_FILE = "menu.json"
SECTIONS_DIR = "sections"


def write_text(path: Path, text: str) -> Path:
    """Write ``text`` through a sibling temp file so readers never see half a file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def part_filename(index: int) -> str:
    return f"part-{index:03d}.md"


def build_split_index(heading: str, part_dir: str, parts: int) -> str:
    lines: List[str] = []
    if heading:
        lines.append(f"{heading}\n\n")
    lines.append(f"Split into {parts} parts:\n\n")
    for index in range(1, parts + 1):
        lines.append(f"- {part_dir}/{part_filename(index)}\n")
    return "".join(lines)


def write_markdown(output_dir: Path, markdown: str, filename: str = DEFAULT_MARKDOWN_FILE) -> Path:
    return write_text(Path(output_dir) / filename, markdown)


def write_parts(part_dir: Path, parts: Sequence[str]) -> List[Path]:
    """Write numbered part files. Files written before a failure are left in place."""

    part_dir.mkdir(parents=True, exist_ok=True)
    return [write_text(part_dir / part_filename(index), part) for index, part in enumerate(parts, start=1)]


def write_markdown_parts(
    output_dir: Path,
    parts: Sequence[str],
    limits: ChunkLimits,
    filename: str = DEFAULT_MARKDOWN_FILE,
) -> Path:
    """Write rendered sections as one file, or as bundles plus an index file."""

    output_dir = Path(output_dir)
    combined = "".join(parts)
    if not limits.enabled:
        return write_markdown(output_dir, combined, filename)

    bundles = bundle_parts(parts, limits)
    if len(bundles) <= 1:
        return write_markdown(output_dir, combined, filename)

    base_name = Path(filename).stem
    write_parts(output_dir / base_name, bundles)
    index = build_split_index(first_heading_line(combined), base_name, len(bundles))
    logger.info("Split %s into %d parts", filename, len(bundles))
    return write_text(output_dir / filename, index)


def write_markdown_file(base_path: Path, markdown: str, limits: ChunkLimits) -> Path:
    """Write ``<base_path>.md``, splitting an oversized section into part files."""

    base_path = Path(base_path)
    target = base_path.with_name(base_path.name + ".md")
    if not limits.enabled or not limits.exceeds_text(markdown):
        return write_text(target, markdown)

    parts = split_markdown_by_headings(markdown, limits)
    if len(parts) <= 1:
        return write_text(target, markdown)

    write_parts(base_path, parts)
    index = build_split_index(first_heading_line(markdown), base_path.name, len(parts))
    logger.info("Split %s into %d parts", target.name, len(parts))
    return write_text(target, index)


def write_json(
    document: Document,
    report: CompletenessReport,
    output_dir: Path,
    filename: str = DEFAULT_JSON_FILE,
) -> Path:
    payload = {
        "heading_ids": document.heading_ids,
        "anchor_targets": document.anchor_targets,
        "sections": [section.to_dict() for section in document.sections],
        "report": report.to_dict(),
    }
    return write_text(Path(output_dir) / filename, json.dumps(payload, indent=2, ensure_ascii=False))


def write_menu(output_dir: Path, nodes: Iterable[MenuNode]) -> Path:
    data = [node.to_dict() for node in nodes]
    return write_text(Path(output_dir) / MENU_FILE, json.dumps(data, indent=2, ensure_ascii=False))


def write_section_files(
    output_dir: Path,
    nodes: Sequence[MenuNode],
    markdown_by_id: Mapping[str, str],
    limits: ChunkLimits,
    max_items: int = 0,
) -> List[Path]:
    """Write one Markdown file per menu entry whose anchor maps to a section.

    Files mirror the menu tree under ``sections/``. ``max_items`` caps how many
    files are written (0 writes all of them).
    """

    base = Path(output_dir) / SECTIONS_DIR
    base.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    def limit_reached() -> bool:
        return max_items > 0 and len(written) >= max_items

    def walk(items: Sequence[MenuNode], parents: List[str]) -> None:
        for node in items:
            if limit_reached():
                return
            part = slugify(node.title, fallback="") or slugify(node.anchor)
            local = parents + [part]
            markdown = markdown_by_id.get(node.anchor) if node.anchor else None
            if markdown and markdown.strip():
                written.append(write_markdown_file(base.joinpath(*local), markdown, limits))
            if node.children:
                walk(node.children, local)

    walk(nodes, [])
    return written


def map_markdown_by_id(sections: Iterable[SectionMarkdown]) -> Dict[str, str]:
    """Index section Markdown by heading ID, then by contained element IDs (first wins)."""

    mapping: Dict[str, str] = {}
    for section in sections:
        if section.heading_id:
            mapping[section.heading_id] = section.markdown
        for element_id in section.content_ids:
            mapping.setdefault(element_id, section.markdown)
    return mapping


__all__ = [
    "build_split_index",
    "map_markdown_by_id",
    "part_filename",
    "write_json",
    "write_markdown",
    "write_markdown_file",
    "write_markdown_parts",
    "write_menu",
    "write_section_files",
    "write_text",
]
