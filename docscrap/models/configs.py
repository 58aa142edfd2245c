from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator

from docscrap.output.chunker import ChunkLimits


DEFAULT_USER_AGENT = "docscrap/0.1 (+https://pypi.org/project/docscrap/)"


class ScrapeConfig(BaseModel):
    urls: List[str] = Field(default_factory=list)
    output_dir: Path = Field(default=Path("output"))
    content_selector: str | None = None
    exclude_selector: str | None = None
    nav_selector: str | None = None
    max_sections: int = Field(default=0, description="0 keeps every section")
    max_menu_items: int = Field(default=0, description="0 writes every menu-linked section")
    max_markdown_bytes: int = 0
    max_chars: int = 0
    max_tokens: int = 0
    strict: bool = False
    write_index: bool = True
    sqlite_db: Path | None = None
    timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator(
        "max_sections",
        "max_menu_items",
        "max_markdown_bytes",
        "max_chars",
        "max_tokens",
    )
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("limits must be >= 0 (0 disables the limit)")
        return value

    @field_validator("urls", mode="before")
    @classmethod
    def _split_urls(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [url.strip() for url in value.split(",") if url.strip()]
        return list(value)

    def chunk_limits(self) -> ChunkLimits:
        return ChunkLimits(
            max_bytes=self.max_markdown_bytes,
            max_chars=self.max_chars,
            max_tokens=self.max_tokens,
        )

    def resolve_paths(self, base_path: Path) -> "ScrapeConfig":
        values = self.model_dump()
        for key in ("output_dir", "sqlite_db"):
            raw = values.get(key)
            if raw is None:
                continue
            values[key] = (base_path / raw).resolve() if not Path(raw).is_absolute() else Path(raw)
        return ScrapeConfig.model_validate(values)


__all__ = ["ScrapeConfig", "DEFAULT_USER_AGENT"]
