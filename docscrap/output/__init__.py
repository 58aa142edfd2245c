"""Markdown-side helpers: size limits, bundling, splitting, index and file writers."""

from .chunker import ChunkLimits, ChunkSize, bundle_parts, estimate_tokens
from .index import HeadingTrail, build_index_records, stable_section_id, write_index
from .splitter import first_heading_line, split_markdown_by_headings
from .storage import SQLiteIndexConfig, SQLiteIndexStore
from .writer import (
    build_split_index,
    write_json,
    write_markdown,
    write_markdown_file,
    write_markdown_parts,
    write_menu,
    write_section_files,
)

__all__ = [
    "ChunkLimits",
    "ChunkSize",
    "HeadingTrail",
    "SQLiteIndexConfig",
    "SQLiteIndexStore",
    "build_index_records",
    "build_split_index",
    "bundle_parts",
    "estimate_tokens",
    "first_heading_line",
    "split_markdown_by_headings",
    "stable_section_id",
    "write_index",
    "write_json",
    "write_markdown",
    "write_markdown_file",
    "write_markdown_parts",
    "write_menu",
    "write_section_files",
]
