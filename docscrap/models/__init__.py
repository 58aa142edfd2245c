from .section import Document, Section
from .record import IndexRecord
from .menu import MenuNode
from .report import CompletenessReport

__all__ = ["Document", "Section", "IndexRecord", "MenuNode", "CompletenessReport"]
