from __future__ import annotations

from collections.abc import Iterable, Iterator

from bs4 import BeautifulSoup, Tag

from ..knowledge_graph.models import ResolvedReference

LINK_CLASS = "lod-link"
IGNORE_CLASS = "lod-ignore"
MARKER_SELECTOR = "a[property=name]"


class ReferenceIndex:
    """Visible label text -> entity reference, for one narrative page.

    Built once from the explicit markers already rendered into the page and
    read-only afterwards. When two markers share a label the later one wins.
    A marker without visible text (an image, say) adds its entity to
    `names()` but no label, since there is nothing to match in the text.
    """

    def __init__(
        self,
        references: dict[str, ResolvedReference] | None = None,
        names: Iterable[str] = (),
    ):
        self._refs: dict[str, ResolvedReference] = dict(references or {})
        self._names: dict[str, None] = dict.fromkeys(names)
        for ref in self._refs.values():
            self._names.setdefault(ref.name, None)

    @classmethod
    def from_soup(cls, soup: BeautifulSoup | Tag, *, selector: str = "#text p") -> ReferenceIndex:
        refs: dict[str, ResolvedReference] = {}
        names: list[str] = []
        for block in soup.select(selector):
            for link in block.select(MARKER_SELECTOR):
                name = link.get("data-name")
                if not name:
                    continue
                names.append(str(name))
                label = link.get_text()
                if not label.strip():
                    continue
                refs[label] = ResolvedReference(
                    label=label,
                    name=str(name),
                    collection=str(link.get("data-collection") or ""),
                    url=str(link.get("href") or ""),
                )
        return cls(refs, names)

    def get(self, label: str) -> ResolvedReference | None:
        return self._refs.get(label)

    def __getitem__(self, label: str) -> ResolvedReference:
        return self._refs[label]

    def __contains__(self, label: object) -> bool:
        return label in self._refs

    def __iter__(self) -> Iterator[str]:
        return iter(self._refs)

    def __len__(self) -> int:
        return len(self._refs)

    def labels_longest_first(self) -> list[str]:
        # sorted() is stable: equal-length labels keep first-seen order.
        return sorted(self._refs, key=len, reverse=True)

    def names(self) -> list[str]:
        """Distinct entity names, in the order their markers were first seen."""
        return list(self._names)
