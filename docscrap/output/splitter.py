from __future__ import annotations

import re
from typing import List, Tuple

from docscrap.output.chunker import ChunkLimits, ChunkSize


_SUBHEADING_PATTERN = re.compile(r"^#{3,6} ")
_BLOCK_SEPARATOR = "\n\n"


def split_markdown_by_headings(markdown: str, limits: ChunkLimits) -> List[str]:
    """Split one oversized section into parts that respect ``limits``.

    Each part repeats the section's own heading line. Bodies are cut at ``###``
    and deeper headings first, then at blank-line paragraph breaks for blocks that
    are still too large. A single paragraph larger than the limits is emitted as
    is rather than truncated.
    """

    markdown = markdown.strip()
    if not markdown:
        return []
    if not limits.enabled or not limits.exceeds_text(markdown):
        return [markdown + "\n"]

    prefix, body = split_heading_prefix(markdown)
    if limits.exceeds_text(prefix):
        # Keep the heading line as ordinary content instead of repeating it.
        prefix, body = "", markdown

    writer = _PartWriter(prefix, limits)
    for block in split_on_subheadings(body):
        writer.add_block(block)
    return writer.parts()


def split_heading_prefix(markdown: str) -> Tuple[str, str]:
    """Return ``(heading line + blank line, rest)`` when the text opens with a ``#`` heading."""

    lines = markdown.split("\n")
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith("#"):
            rest = "\n".join(lines[index + 1 :]).strip()
            return stripped + "\n\n", rest
        break
    return "", markdown


def split_on_subheadings(body: str) -> List[str]:
    blocks: List[str] = []
    current: List[str] = []
    for line in body.replace("\r\n", "\n").split("\n"):
        if _SUBHEADING_PATTERN.match(line.strip()) and current:
            blocks.append("\n".join(current).strip())
            current = []
        current.append(line)
    if current:
        blocks.append("\n".join(current).strip())
    return blocks


def split_on_paragraphs(body: str) -> List[str]:
    paragraphs = body.replace("\r\n", "\n").split(_BLOCK_SEPARATOR)
    return [paragraph.strip() for paragraph in paragraphs if paragraph.strip()]


def first_heading_line(markdown: str) -> str:
    for line in markdown.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("#"):
            return line
        break
    return ""


class _PartWriter:
    """Accumulates blocks into parts that each start with the shared prefix."""

    def __init__(self, prefix: str, limits: ChunkLimits) -> None:
        self.prefix = prefix
        self.limits = limits
        self._prefix_size = ChunkSize.of(prefix)
        self._parts: List[str] = []
        self._buffer: List[str] = []
        self._size = ChunkSize()
        self._reset()

    def _reset(self) -> None:
        self._buffer = [self.prefix] if self.prefix else []
        self._size = self._prefix_size

    def _has_content_beyond_prefix(self) -> bool:
        if not self.prefix.strip():
            return self._size.bytes > 0
        return (
            self._size.bytes > self._prefix_size.bytes
            or self._size.chars > self._prefix_size.chars
            or self._size.tokens > self._prefix_size.tokens
        )

    def add_block(self, block: str) -> None:
        block = block.strip()
        if not block:
            return
        if self.limits.exceeds_text(block):
            pieces = split_on_paragraphs(block)
        else:
            pieces = [block]
        for piece in pieces:
            self._add_piece(piece)

    def _add_piece(self, piece: str) -> None:
        piece = piece.strip()
        if not piece:
            return
        separator = _BLOCK_SEPARATOR if self._has_content_beyond_prefix() else ""
        combined = self._size + ChunkSize.of(separator) + ChunkSize.of(piece)
        if separator and self.limits.exceeds(combined):
            self._flush()
            separator = ""
            combined = self._size + ChunkSize.of(piece)

        if separator:
            self._buffer.append(separator)
        self._buffer.append(piece)
        self._size = combined

        if self.limits.exceeds(self._size) and self._has_content_beyond_prefix():
            self._flush()

    def _flush(self) -> None:
        text = "".join(self._buffer).strip()
        if text:
            self._parts.append(text + "\n")
        self._reset()

    def parts(self) -> List[str]:
        if self._has_content_beyond_prefix():
            self._flush()
        return list(self._parts)


__all__ = [
    "first_heading_line",
    "split_heading_prefix",
    "split_markdown_by_headings",
    "split_on_paragraphs",
    "split_on_subheadings",
]
