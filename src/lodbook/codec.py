"""JSON-LD and Turtle serialization of compiled graphs.

The core only produces pre-compaction graph objects; everything here is a
thin layer over rdflib. Parse and serialize errors are not caught: a graph
the codec rejects is a failed build step for the caller to handle.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from rdflib import Graph

from .config import DEFAULT_CONTEXT

logger = logging.getLogger(__name__)

# schema.org is used by nearly every site; resolving it inline keeps builds
# off the network.
PRELOADED_CONTEXTS: dict[str, dict[str, Any]] = {
    "http://schema.org/": {"@vocab": "http://schema.org/", "id": "@id", "type": "@type"},
    "https://schema.org/": {"@vocab": "https://schema.org/", "id": "@id", "type": "@type"},
}


def inline_context(context: Any) -> Any:
    if isinstance(context, str):
        key = context if context.endswith("/") else f"{context}/"
        return PRELOADED_CONTEXTS.get(key, context)
    return context


class JsonLdCodec:
    def __init__(self, context: Any = DEFAULT_CONTEXT):
        self.context = context

    def _document(self, data: Mapping[str, Any], context: Any) -> dict[str, Any]:
        doc = dict(data)
        doc["@context"] = inline_context(doc.get("@context", context))
        return doc

    def to_rdf(self, data: Mapping[str, Any], context: Any = None) -> Graph:
        context = self.context if context is None else context
        doc = self._document(data, context)
        graph = Graph()
        graph.parse(data=json.dumps(doc, default=str), format="json-ld")
        logger.debug("Parsed %d triples", len(graph))
        return graph

    def compact(self, data: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        """Expand `data` to triples and compact it back against `context`."""
        context = self.context if context is None else context
        graph = self.to_rdf(data, context)
        out = graph.serialize(format="json-ld", context=inline_context(context), auto_compact=True)
        compacted = json.loads(out)
        if isinstance(compacted, dict):
            compacted["@context"] = context
        return compacted

    def to_turtle(self, data: Mapping[str, Any], context: Any = None) -> str:
        return self.to_rdf(data, context).serialize(format="turtle")

    def dumps(self, data: Any) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)
