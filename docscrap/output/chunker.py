from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True, slots=True)
class ChunkSize:
    """Size of a Markdown fragment in bytes (UTF-8), characters and estimated tokens."""

    bytes: int = 0
    chars: int = 0
    tokens: int = 0

    @classmethod
    def of(cls, text: str) -> "ChunkSize":
        if not text:
            return cls()
        chars = len(text)
        return cls(
            bytes=len(text.encode("utf-8")),
            chars=chars,
            tokens=estimate_tokens(chars),
        )

    def __add__(self, other: "ChunkSize") -> "ChunkSize":
        return ChunkSize(
            bytes=self.bytes + other.bytes,
            chars=self.chars + other.chars,
            tokens=self.tokens + other.tokens,
        )


def estimate_tokens(chars: int) -> int:
    """Rough token estimate: one token per four characters, rounded up."""

    if chars <= 0:
        return 0
    return (chars + 3) // 4


@dataclass(frozen=True, slots=True)
class ChunkLimits:
    """Optional ceilings for output files; 0 leaves a dimension unlimited."""

    max_bytes: int = 0
    max_chars: int = 0
    max_tokens: int = 0

    @property
    def enabled(self) -> bool:
        return self.max_bytes > 0 or self.max_chars > 0 or self.max_tokens > 0

    def exceeds(self, size: ChunkSize) -> bool:
        """True when any configured ceiling is surpassed."""

        if self.max_bytes > 0 and size.bytes > self.max_bytes:
            return True
        if self.max_chars > 0 and size.chars > self.max_chars:
            return True
        if self.max_tokens > 0 and size.tokens > self.max_tokens:
            return True
        return False

    def exceeds_text(self, text: str) -> bool:
        return self.exceeds(ChunkSize.of(text))


def bundle_parts(parts: Iterable[str], limits: ChunkLimits) -> List[str]:
    """Greedily group rendered sections into bundles that respect ``limits``.

    Sections are never split here. A section that alone exceeds the limits
    becomes its own bundle.
    """

    bundles: List[str] = []
    current: List[str] = []
    current_size = ChunkSize()

    def flush() -> None:
        nonlocal current, current_size
        text = "".join(current).strip()
        if text:
            bundles.append(text + "\n")
        current = []
        current_size = ChunkSize()

    for part in parts:
        part = part.strip()
        if not part:
            continue
        part += "\n"
        part_size = ChunkSize.of(part)

        if current and limits.exceeds(current_size + part_size):
            flush()
        if not current and limits.exceeds(part_size):
            bundles.append(part)
            continue
        current.append(part)
        current_size = current_size + part_size

    flush()
    return bundles


__all__ = ["ChunkLimits", "ChunkSize", "bundle_parts", "estimate_tokens"]
