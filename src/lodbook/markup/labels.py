from __future__ import annotations

import logging

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from ..knowledge_graph.models import ResolvedReference
from .references import IGNORE_CLASS, LINK_CLASS, ReferenceIndex
from .tokenize import split_on_label

logger = logging.getLogger(__name__)


def has_class(node: PageElement, cls: str) -> bool:
    if not isinstance(node, Tag):
        return False
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return cls in classes


def is_linked(node: PageElement) -> bool:
    return has_class(node, LINK_CLASS) or (isinstance(node, Tag) and node.name == "a")


def is_text(node: PageElement) -> bool:
    # Comments, CDATA and doctypes are strings too, but never prose.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class LabelMarkupEngine:
    """Links every further occurrence of a page's marked-up labels.

    Once a label has been marked up explicitly somewhere on a page, its other
    plain-text occurrences in the page's text blocks are wrapped in the same
    link. Longer labels go first so "James Minahan" is linked whole before
    "James" is considered; links created here carry the link class, which
    makes later, shorter labels skip them. Ignore spans are never touched.
    """

    def __init__(self, references: ReferenceIndex, *, selector: str = "#text p"):
        self.references = references
        self.selector = selector

    def markup(self, soup: BeautifulSoup) -> int:
        labels = self.references.labels_longest_first()
        added = 0
        for block in soup.select(self.selector):
            for label in labels:
                added += self.markup_block(soup, block, label)
        logger.debug("Added %d label links", added)
        return added

    def markup_block(self, soup: BeautifulSoup, block: Tag, label: str) -> int:
        ref = self.references[label]
        added = 0
        for child in list(block.children):
            if is_linked(child) or has_class(child, IGNORE_CLASS):
                continue
            if is_text(child):
                added += self._link_text(soup, child, ref)
            elif self._wraps_only_label(child, label):
                self._wrap_contents(soup, child, ref)
                added += 1
        return added

    @staticmethod
    def _wraps_only_label(node: PageElement, label: str) -> bool:
        # An ignore span anywhere inside keeps the whole element off-limits.
        return (
            isinstance(node, Tag)
            and node.get_text() == label
            and node.find("a") is None
            and node.find(class_=IGNORE_CLASS) is None
        )

    def _link_text(self, soup: BeautifulSoup, node: NavigableString, ref: ResolvedReference) -> int:
        pieces = split_on_label(str(node), ref.label)
        if not any(is_label for _, is_label in pieces):
            return 0
        # Each piece becomes its own sibling, so the new links never merge
        # into the surrounding text.
        replacement: list[PageElement] = []
        for text, is_label in pieces:
            if is_label:
                link = self.new_link(soup, ref)
                link.string = text
                replacement.append(link)
            else:
                replacement.append(NavigableString(text))
        node.replace_with(*replacement)
        return sum(1 for _, is_label in pieces if is_label)

    def _wrap_contents(self, soup: BeautifulSoup, node: Tag, ref: ResolvedReference) -> None:
        link = self.new_link(soup, ref)
        for inner in list(node.contents):
            link.append(inner.extract())
        node.append(link)

    @staticmethod
    def new_link(soup: BeautifulSoup, ref: ResolvedReference) -> Tag:
        return soup.new_tag(
            "a",
            attrs={
                "class": [LINK_CLASS],
                "data-name": ref.name,
                "data-collection": ref.collection,
                "property": "name",
                "href": ref.url,
            },
        )
