from __future__ import annotations

from typing import Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from docscrap.errors import ExtractionError, SelectorNotFoundError
from docscrap.models.menu import MenuNode


def extract_menu(html: str, selector: str | None) -> List[MenuNode]:
    """Build the navigation tree found under ``selector``.

    Nested ``ul``/``ol`` lists become children. A navigation element without a
    list yields a flat list of its links.
    """

    if not selector or not selector.strip():
        raise ValueError("nav selector is required")
    soup = BeautifulSoup(html, "html.parser")
    try:
        nav = soup.select_one(selector)
    except SelectorSyntaxError as exc:
        raise ExtractionError(f"invalid selector: {exc}", selector=selector) from exc
    if nav is None:
        raise SelectorNotFoundError("nav selector not found", selector=selector)

    menu_list = nav.find(["ul", "ol"])
    if menu_list is None:
        return _extract_flat(nav)
    return _extract_list(menu_list)


def anchor_from_href(href: str) -> str:
    href = href.strip()
    if not href:
        return ""
    if href.startswith("#"):
        return href[1:]
    try:
        return urlparse(href).fragment
    except ValueError:
        return ""


def flatten_menu(nodes: List[MenuNode], depth: int = 0) -> List[Dict[str, object]]:
    items: List[Dict[str, object]] = []
    for node in nodes:
        items.append({"title": node.title, "anchor": node.anchor, "depth": depth})
        items.extend(flatten_menu(node.children, depth + 1))
    return items


def _extract_list(menu_list: Tag) -> List[MenuNode]:
    nodes: List[MenuNode] = []
    for item in menu_list.find_all("li", recursive=False):
        node = _node_from_item(item)
        if node.title or node.href:
            nodes.append(node)
    return nodes


def _node_from_item(item: Tag) -> MenuNode:
    link = item.find("a")
    href = link.get("href", "") if link is not None else ""
    title = link.get_text().strip() if link is not None else ""
    node = MenuNode(title=title, href=href, anchor=anchor_from_href(href))

    child_list = item.find(["ul", "ol"])
    if child_list is not None:
        for child in _extract_list(child_list):
            node.add_child(child)
    return node


def _extract_flat(nav: Tag) -> List[MenuNode]:
    nodes: List[MenuNode] = []
    for link in nav.find_all("a"):
        href = link.get("href", "")
        title = link.get_text().strip()
        if not title and not href:
            continue
        nodes.append(MenuNode(title=title, href=href, anchor=anchor_from_href(href)))
    return nodes


__all__ = ["anchor_from_href", "extract_menu", "flatten_menu"]
