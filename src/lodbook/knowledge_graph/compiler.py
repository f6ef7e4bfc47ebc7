"""Record to graph hydration.

A record's property tree is walked recursively. Every `name` found below the
top level is looked up in the record store and replaced by a typed,
identified link, so that relationships between records become edges in the
published graph:

    {"name": "Ann", "type": "person", "knows": [{"name": "Bob"}]}

becomes

    {"@id": ".../people/ann/", "@type": "Person", "name": "Ann",
     "knows": [{"name": "Bob", "@id": ".../people/bob/", "@type": "Person"}]}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from ..context import BuildContext
from ..errors import AdvisoryKind
from .models import (
    ID_KEYS,
    NAME_KEY,
    TYPE_KEYS,
    GraphNode,
    ListValue,
    NestedObject,
    PropertyValue,
    Record,
    Reference,
    Scalar,
)

logger = logging.getLogger(__name__)

DEFAULT_TYPE_TAG = "Thing"
IMAGE_TYPE_MARKER = "ImageObject"


def _plain(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


class GraphCompiler:
    """Normalizes records into graph nodes against one build context."""

    def __init__(self, ctx: BuildContext):
        self.ctx = ctx

    def hydrate(self, record: Record) -> GraphNode:
        tag = self._type_tag(record)
        node = GraphNode(
            id=self.node_id(record),
            type=self.ctx.types.graph_type(tag),
            name=record.name,
            properties=self._hydrate_properties(record.properties),
        )
        logger.debug("Hydrated %r as %s", record.name, node.id)
        return node

    def hydrate_name(self, name: str) -> GraphNode | None:
        record = self.ctx.lookup(name)
        if record is None:
            self.ctx.advisories.report(AdvisoryKind.UNRESOLVED_REFERENCE, name)
            return None
        return self.hydrate(record)

    def node_id(self, record: Record) -> str:
        """Record's own id if it has one, else its entity URI."""
        if record.id:
            return record.id
        tag = record.type or DEFAULT_TYPE_TAG
        return self.ctx.entity_uri(self.ctx.types.collection(tag), record.name)

    def _type_tag(self, record: Record) -> str:
        tag = record.type or DEFAULT_TYPE_TAG
        if tag not in self.ctx.types:
            self.ctx.advisories.report(AdvisoryKind.UNCONFIGURED_TYPE, tag, f"record {record.name!r}")
        return tag

    def _hydrate_properties(self, properties: Mapping[str, PropertyValue]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in properties.items():
            out.update(self._hydrate_entry(key, value))
        return out

    def _hydrate_entry(self, key: str, value: PropertyValue) -> dict[str, Any]:
        if isinstance(value, Scalar):
            return self._hydrate_scalar(key, _plain(value.value))
        if isinstance(value, Reference):
            return {key: self._hydrate_reference(value)}
        if isinstance(value, NestedObject):
            return {key: self._hydrate_properties(value.properties)}
        if isinstance(value, ListValue):
            return {key: self._collapse([self._hydrate_entry(key, item) for item in value.items])}
        raise TypeError(f"unsupported property value for {key!r}: {value!r}")

    def _hydrate_scalar(self, key: str, value: Any) -> dict[str, Any]:
        if key == NAME_KEY:
            return self._hydrate_link(str(value), enclosing={})
        if key in TYPE_KEYS:
            return {"@type": self.ctx.types.graph_type(str(value))}
        if key in ID_KEYS:
            return {"@id": value}
        return {key: value}

    def _hydrate_reference(self, ref: Reference) -> dict[str, Any]:
        link = self._hydrate_link(ref.name, enclosing=ref.properties)
        # Explicit id/type on the referencing object win over looked-up ones.
        link.update(self._hydrate_properties(ref.properties))
        return link

    def _hydrate_link(self, name: str, *, enclosing: Mapping[str, Any]) -> dict[str, Any]:
        record = self.ctx.lookup(name)
        if record is None:
            self.ctx.advisories.report(AdvisoryKind.UNRESOLVED_REFERENCE, name)
            return {"name": name}

        link: dict[str, Any] = {"name": name}
        if not any(k in enclosing for k in ID_KEYS):
            link["@id"] = self.node_id(record)
        link["@type"] = self.ctx.types.graph_type(self._type_tag(record))
        if IMAGE_TYPE_MARKER in link["@type"] and record.get("image") is not None:
            link["image"] = _plain(record.get("image"))
        return link

    @staticmethod
    def _collapse(wrapped: list[dict[str, Any]]) -> list[Any]:
        """Drop the per-element wrapper key of a hydrated list.

        An element that hydrated to a single entry keeps just its value. An
        element that hydrated to several entries (a bare name expands into
        name, @id and @type) keeps the list of those values.
        """
        collapsed: list[Any] = []
        for entry in wrapped:
            values = list(entry.values())
            collapsed.append(values[0] if len(values) == 1 else values)
        return collapsed
