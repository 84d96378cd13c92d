"""
Document query capability used by the extractor.

The extractor only asks structural questions (first/all nodes matching a CSS
selector, an attribute, normalized text). SoupQuery answers them with
BeautifulSoup; another parser can be plugged in by implementing DocumentQuery.
"""

import re
from typing import Any, List, Optional

from bs4 import BeautifulSoup, Tag

from app.fetch.utils import normalize_whitespace


class DocumentQuery:
    def select_first(self, selector: str) -> Optional[Any]:
        raise NotImplementedError

    def select_all(self, selector: str) -> List[Any]:
        raise NotImplementedError

    def attr(self, node: Any, name: str) -> Optional[str]:
        raise NotImplementedError

    def text(self, node: Any) -> str:
        raise NotImplementedError

    def scope(self, node: Any) -> "DocumentQuery":
        raise NotImplementedError

    def contains_text(self, tag: str, pattern: "re.Pattern[str]") -> List[Any]:
        raise NotImplementedError

    def first_text(self, selector: str) -> str:
        node = self.select_first(selector)
        return self.text(node) if node is not None else ""

    def first_attr(self, selector: str, name: str) -> str:
        node = self.select_first(selector)
        if node is None:
            return ""
        return (self.attr(node, name) or "").strip()


class SoupQuery(DocumentQuery):
    """DocumentQuery over a BeautifulSoup tree. Matches come back in document order."""

    def __init__(self, root: Tag):
        self._root = root

    @classmethod
    def from_markup(cls, markup: str) -> "SoupQuery":
        return cls(BeautifulSoup(markup or "", "html.parser"))

    def select_first(self, selector: str) -> Optional[Tag]:
        return self._root.select_one(selector)

    def select_all(self, selector: str) -> List[Tag]:
        return list(self._root.select(selector))

    def attr(self, node: Tag, name: str) -> Optional[str]:
        value = node.get(name)
        if isinstance(value, list):
            # class-like attributes come back as token lists
            value = " ".join(value)
        return value

    def text(self, node: Tag) -> str:
        return normalize_whitespace(node.get_text())

    def scope(self, node: Tag) -> "SoupQuery":
        return SoupQuery(node)

    def contains_text(self, tag: str, pattern: "re.Pattern[str]") -> List[Tag]:
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        return [el for el in self._root.find_all(tag) if pattern.search(self.text(el))]
