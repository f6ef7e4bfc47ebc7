from __future__ import annotations

import html

from bs4 import BeautifulSoup, Tag

from ..knowledge_graph.models import Mention, NarrativeDocument
from .labels import is_text
from .tokenize import words


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def paragraph_number(block: Tag) -> str | None:
    """`para-3` -> `3`; None for an unnumbered block."""
    block_id = block.get("id")
    if not block_id or "-" not in block_id:
        return None
    return str(block_id).split("-", 1)[1]


class MentionExtractor:
    """Finds where an entity is linked in a page and what surrounds each link.

    Mentions come back in block order, then left to right within a block.
    The context of each one is up to `context_words` words either side of the
    link, tags stripped, with the link's own text emphasised:

        "the ship carrying <em>James Minahan</em> docked in Fremantle"
    """

    def __init__(self, *, selector: str = "#text p", context_words: int = 5):
        self.selector = selector
        self.context_words = context_words

    def extract(self, document: NarrativeDocument, name: str, *, soup: BeautifulSoup | None = None) -> list[Mention]:
        if soup is None:
            soup = BeautifulSoup(document.html, "lxml")
        mentions: list[Mention] = []
        for block in soup.select(self.selector):
            para = paragraph_number(block)
            for link in block.find_all("a", attrs={"data-name": name}):
                mentions.append(
                    Mention(
                        document_title=document.title,
                        document_chapter=document.chapter,
                        document_url=document.url,
                        paragraph_id=para,
                        context=self.context_for(block, link),
                    )
                )
        return mentions

    def context_for(self, block: Tag, link: Tag) -> str:
        before: list[str] = []
        after: list[str] = []
        passed = False
        for node in block.descendants:
            if node is link:
                passed = True
                continue
            if not is_text(node):
                continue
            if passed and any(parent is link for parent in node.parents):
                continue
            (after if passed else before).append(str(node))

        n = self.context_words
        before_words = words("".join(before))[-n:] if n > 0 else []
        after_words = words("".join(after))[:n] if n > 0 else []
        label = _escape(link.get_text())
        head = _escape(" ".join(before_words))
        tail = _escape(" ".join(after_words))
        return f"{head} <em>{label}</em> {tail}".strip()
