from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class MenuNode:
    """Navigation entry extracted from a sidebar or table of contents."""

    title: str
    href: str
    anchor: str
    children: List["MenuNode"] = field(default_factory=list)

    def add_child(self, child: "MenuNode") -> None:
        self.children.append(child)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title, "href": self.href, "anchor": self.anchor}
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


__all__ = ["MenuNode"]
