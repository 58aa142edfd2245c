"""Convert documentation pages into heading-bounded Markdown/JSON outputs."""

from .models.section import Document, Section
from .models.record import IndexRecord

__all__ = ["Document", "Section", "IndexRecord"]
