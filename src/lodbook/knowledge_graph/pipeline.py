from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..context import BuildContext
from ..errors import Advisory, AdvisoryKind, BuildOrderError, DuplicateDocumentError
from ..markup.mentions import MentionExtractor
from ..markup.page import NarrativePage
from ..settings import LodbookSettings, settings as default_settings
from .assembler import GraphAssembler, mentioning_documents
from .compiler import DEFAULT_TYPE_TAG, GraphCompiler
from .models import DocumentGraph, GraphNode, NarrativeDocument, Record

if TYPE_CHECKING:
    from ..codec import JsonLdCodec
    from ..config import CollectionStyle

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildStats:
    documents: int = 0
    entities: int = 0
    skipped_records: int = 0
    mentions: int = 0
    documents_ms: float = 0.0
    entities_ms: float = 0.0


@dataclass(slots=True)
class DocumentResult:
    document: NarrativeDocument
    graph: DocumentGraph


@dataclass(slots=True)
class EntityResult:
    record: Record
    collection: str
    template: str | None
    node: GraphNode

    def lod(self, context: Any) -> dict[str, Any]:
        return {"@context": context, "@graph": self.node.to_graph()}


@dataclass(slots=True)
class BuildResult:
    documents: list[DocumentResult] = field(default_factory=list)
    entities: list[EntityResult] = field(default_factory=list)
    advisories: list[Advisory] = field(default_factory=list)
    stats: BuildStats = field(default_factory=BuildStats)


class LodBuild:
    """Two-phase build over one set of records and narrative pages.

    Phase one enriches every page. Entity enrichment scans all enriched pages
    for mentions, so phase two refuses to start until `close_documents()`
    has been called.
    """

    def __init__(
        self,
        ctx: BuildContext,
        *,
        codec: JsonLdCodec | None = None,
        collections: Iterable[CollectionStyle] = (),
        cfg: LodbookSettings | None = None,
    ):
        self.ctx = ctx
        self.codec = codec
        self.cfg = cfg or default_settings
        self.collections = list(collections) if self.cfg.inject_collection_styles else []
        self.compiler = GraphCompiler(ctx)
        self.assembler = GraphAssembler()
        self.extractor = MentionExtractor(
            selector=self.cfg.text_selector, context_words=self.cfg.context_words
        )
        self.documents: list[DocumentResult] = []
        self._page_ids: set[str] = set()
        self._closed = False

    def process_document(self, document: NarrativeDocument) -> DocumentResult:
        if self._closed:
            raise BuildOrderError(f"document phase is closed; cannot add {document.url}")
        page_id = self.ctx.page_uri(document.url)
        if page_id in self._page_ids:
            raise DuplicateDocumentError(f"{document.url} resolves to {page_id}, already used by another page")
        self._page_ids.add(page_id)
        page = NarrativePage(
            document,
            self.ctx,
            self.compiler,
            text_selector=self.cfg.text_selector,
            quote_selector=self.cfg.quote_selector,
        )
        graph = page.process(codec=self.codec, collections=self.collections)
        result = DocumentResult(document=document, graph=graph)
        self.documents.append(result)
        return result

    def close_documents(self) -> None:
        self._closed = True

    def enrich_entity(self, record: Record) -> EntityResult | None:
        """Build an entity's page graph, or None if its type is unconfigured."""
        if not self._closed:
            raise BuildOrderError("entities can only be enriched after every document is processed")

        tag = record.type or DEFAULT_TYPE_TAG
        if tag not in self.ctx.types:
            self.ctx.advisories.report(
                AdvisoryKind.UNCONFIGURED_TYPE, tag, f"no page for record {record.name!r}"
            )
            return None

        collection = self.ctx.types.collection(tag)
        node = self.compiler.hydrate(record)
        node.main_entity_of_page = f"{self.ctx.entity_uri(collection, record.name)}index.html"

        docs = mentioning_documents(node, (d.graph for d in self.documents))
        # Page ids are unique within a build.
        by_id = {d.graph.id: d.document for d in self.documents}
        mentions = []
        for doc in docs:
            mentions.extend(self.extractor.extract(by_id[doc.id], record.name))
        self.assembler.assemble(node, docs, mentions)

        return EntityResult(
            record=record,
            collection=collection,
            template=self.ctx.types.template(tag),
            node=node,
        )

    def run(self, documents: Iterable[NarrativeDocument]) -> BuildResult:
        result = BuildResult()

        t0 = time.perf_counter()
        for document in documents:
            result.documents.append(self.process_document(document))
        self.close_documents()
        t1 = time.perf_counter()

        for record in self.ctx.store:
            entity = self.enrich_entity(record)
            if entity is None:
                result.stats.skipped_records += 1
                continue
            result.entities.append(entity)
            result.stats.mentions += len(entity.node.contexts)
        t2 = time.perf_counter()

        result.stats.documents = len(result.documents)
        result.stats.entities = len(result.entities)
        result.stats.documents_ms = (t1 - t0) * 1000.0
        result.stats.entities_ms = (t2 - t1) * 1000.0
        result.advisories = list(self.ctx.advisories)
        logger.info(
            "Built %d pages and %d entities (%d advisories)",
            result.stats.documents,
            result.stats.entities,
            len(result.advisories),
        )
        return result
