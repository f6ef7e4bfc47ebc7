from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence

from ..errors import GraphAssemblyError
from .models import DocumentGraph, GraphNode, Mention

logger = logging.getLogger(__name__)


def mentioning_documents(node: GraphNode, documents: Iterable[DocumentGraph]) -> list[DocumentGraph]:
    """Pages whose `mentions` include the node, in the given order."""
    return [doc for doc in documents if doc.mentions_entity(node.id)]


class GraphAssembler:
    """Folds back-references and mention contexts into entity graphs.

    Each entity may be assembled once per build; a second call for the same
    node id raises instead of duplicating entries. Different entities can be
    assembled from different threads.
    """

    def __init__(self) -> None:
        self._assembled: set[str] = set()
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, node_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(node_id, threading.Lock())

    def assemble(
        self,
        node: GraphNode,
        documents: Sequence[DocumentGraph],
        mentions: Sequence[Mention],
    ) -> GraphNode:
        with self._lock_for(node.id):
            if node.id in self._assembled:
                raise GraphAssemblyError(f"entity graph {node.id} already assembled")
            self._assembled.add(node.id)

            # No documents means no mentionedBy key at all.
            if documents:
                node.mentioned_by.extend(doc.back_reference() for doc in documents)
            node.contexts.extend(mentions)

        logger.debug(
            "Assembled %s: %d pages, %d mentions", node.name, len(documents), len(mentions)
        )
        return node
