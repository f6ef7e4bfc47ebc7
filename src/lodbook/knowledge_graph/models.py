from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

# Keys that describe the record itself rather than one of its properties.
NAME_KEY = "name"
TYPE_KEYS = ("type", "@type")
ID_KEYS = ("id", "@id")


@dataclass(frozen=True, slots=True)
class Scalar:
    value: Any


@dataclass(frozen=True, slots=True)
class Reference:
    """A mapping carrying a `name`: a pointer to another record by name."""

    name: str
    properties: dict[str, PropertyValue] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NestedObject:
    properties: dict[str, PropertyValue] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ListValue:
    items: tuple[PropertyValue, ...] = ()


PropertyValue = Union[Scalar, Reference, NestedObject, ListValue]


def classify(value: Any) -> PropertyValue:
    """Tag a raw property value with its structural variant."""
    if isinstance(value, Mapping):
        name = value.get(NAME_KEY)
        if isinstance(name, str):
            props = {str(k): classify(v) for k, v in value.items() if k != NAME_KEY}
            return Reference(name=name, properties=props)
        return NestedObject(properties={str(k): classify(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return ListValue(items=tuple(classify(v) for v in value))
    return Scalar(value)


def _first(mapping: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for k in keys:
        if mapping.get(k) is not None:
            return mapping[k]
    return None


@dataclass(frozen=True, slots=True)
class Record:
    """An entity record as read from the record file.

    `properties` excludes the record's own name, type and id.
    """

    name: str
    type: str | None = None
    id: str | None = None
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Record:
        reserved = {NAME_KEY, *TYPE_KEYS, *ID_KEYS}
        rtype = _first(mapping, TYPE_KEYS)
        rid = _first(mapping, ID_KEYS)
        return cls(
            name=str(mapping[NAME_KEY]),
            type=str(rtype) if rtype is not None else None,
            id=str(rid) if rid is not None else None,
            properties={str(k): classify(v) for k, v in mapping.items() if k not in reserved},
            raw=dict(mapping),
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)


@dataclass(frozen=True, slots=True)
class ResolvedReference:
    """What an explicit marker resolved a visible label to."""

    label: str
    name: str
    collection: str
    url: str


@dataclass(frozen=True, slots=True)
class Mention:
    """One linked occurrence of an entity inside a narrative page."""

    document_title: str
    document_chapter: str | None
    document_url: str
    paragraph_id: str | None
    context: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_title": self.document_title,
            "document_chapter": self.document_chapter,
            "document_url": self.document_url,
            "para": self.paragraph_id,
            "context": self.context,
        }


@dataclass(frozen=True, slots=True)
class MentionedBy:
    """Back-reference from an entity to a page that mentions it."""

    id: str
    name: str
    type: str = "WebPage"

    def to_graph(self) -> dict[str, Any]:
        return {"@id": self.id, "name": self.name, "@type": self.type}


@dataclass(slots=True)
class GraphNode:
    """Normalized linked-data node for one entity.

    `contexts` holds display snippets for the entity page; it is not part of
    the graph and never appears in `to_graph()`.
    """

    id: str
    type: str
    name: str
    properties: dict[str, Any] = field(default_factory=dict)
    mentioned_by: list[MentionedBy] = field(default_factory=list)
    contexts: list[Mention] = field(default_factory=list)
    main_entity_of_page: str | None = None

    def to_graph(self) -> dict[str, Any]:
        graph: dict[str, Any] = {"@id": self.id, "@type": self.type, "name": self.name}
        graph.update(self.properties)
        if self.mentioned_by:
            graph["mentionedBy"] = [m.to_graph() for m in self.mentioned_by]
        if self.main_entity_of_page:
            graph["mainEntityOfPage"] = self.main_entity_of_page
        return graph


@dataclass(slots=True)
class NarrativeDocument:
    """A rendered narrative page.

    `html` is replaced by the enriched output once the page has been processed.
    """

    url: str
    title: str
    html: str
    chapter: str | None = None

    @property
    def graph_name(self) -> str:
        return f"Chapter {self.chapter}: {self.title}"


@dataclass(slots=True)
class DocumentGraph:
    """Linked-data view of a narrative page and the entities it mentions."""

    id: str
    title: str
    name: str
    mentions: list[GraphNode] = field(default_factory=list)

    def mentions_entity(self, node_id: str) -> bool:
        return any(node.id == node_id for node in self.mentions)

    def back_reference(self) -> MentionedBy:
        return MentionedBy(id=self.id, name=self.title)

    def to_graph(self) -> dict[str, Any]:
        return {
            "@id": self.id,
            "name": self.name,
            "@type": "WebPage",
            "mentions": [node.to_graph() for node in self.mentions],
        }
