from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup

from ..config import CollectionStyle
from ..context import BuildContext
from ..knowledge_graph.compiler import GraphCompiler
from ..knowledge_graph.models import DocumentGraph, NarrativeDocument
from .labels import LabelMarkupEngine
from .references import ReferenceIndex

if TYPE_CHECKING:
    from ..codec import JsonLdCodec

logger = logging.getLogger(__name__)

PAGE_DATA_ID = "page-data"


class NarrativePage:
    """Enrichment of one rendered narrative page.

    Run in order: number_blocks, collect_references, markup_labels,
    build_graph, embed_page_data. `process` does all of it.
    """

    def __init__(
        self,
        document: NarrativeDocument,
        ctx: BuildContext,
        compiler: GraphCompiler,
        *,
        text_selector: str = "#text p",
        quote_selector: str = "blockquote",
    ):
        self.document = document
        self.ctx = ctx
        self.compiler = compiler
        self.text_selector = text_selector
        self.quote_selector = quote_selector
        self.soup = BeautifulSoup(document.html, "lxml")
        self.references = ReferenceIndex()

    @property
    def page_id(self) -> str:
        return self.ctx.page_uri(self.document.url)

    def number_blocks(self) -> None:
        """Give text blocks and quotes stable ids for the reader interface."""
        for index, block in enumerate(self.soup.select(self.text_selector)):
            block["id"] = f"para-{index}"
        for index, quote in enumerate(self.soup.select(self.quote_selector)):
            quote["id"] = f"quote-{index}"

    def collect_references(self) -> ReferenceIndex:
        self.references = ReferenceIndex.from_soup(self.soup, selector=self.text_selector)
        return self.references

    def markup_labels(self) -> int:
        engine = LabelMarkupEngine(self.references, selector=self.text_selector)
        return engine.markup(self.soup)

    def build_graph(self) -> DocumentGraph:
        mentions = []
        for name in self.references.names():
            node = self.compiler.hydrate_name(name)
            if node is not None:
                mentions.append(node)
        return DocumentGraph(
            id=self.page_id,
            title=self.document.title,
            name=self.document.graph_name,
            mentions=mentions,
        )

    def embed_page_data(self, jsonld: Any) -> None:
        text = json.dumps(jsonld, indent=2, ensure_ascii=False, default=str)
        script = self.soup.new_tag("script", attrs={"id": PAGE_DATA_ID, "type": "application/ld+json"})
        # A literal "</" would close the script element early.
        script.string = text.replace("</", "<\\/")
        (self.soup.body or self.soup).append(script)

    def add_styles(self, collections: Iterable[CollectionStyle]) -> None:
        css = ""
        for collection in collections:
            if not collection.color:
                continue
            css += f".{collection.name} {{ background-color: {collection.color}; border-color: {collection.color}}}\n"
            css += f".{collection.name}.inverse {{ background-color: #ffffff; color: {collection.color}}}\n"
        if not css:
            return
        style = self.soup.new_tag("style", attrs={"type": "text/css"})
        style.string = css
        head = self.soup.head
        if head is None:
            head = self.soup.new_tag("head")
            if self.soup.html is not None:
                self.soup.html.insert(0, head)
            else:
                self.soup.insert(0, head)
        head.append(style)

    def process(
        self,
        *,
        codec: JsonLdCodec | None = None,
        collections: Iterable[CollectionStyle] = (),
    ) -> DocumentGraph:
        self.number_blocks()
        self.collect_references()
        added = self.markup_labels()
        graph = self.build_graph()

        lod = {"@context": self.ctx.context, "@graph": graph.to_graph()}
        self.embed_page_data(codec.compact(lod, self.ctx.context) if codec else lod)
        self.add_styles(collections)

        self.document.html = str(self.soup)
        logger.info(
            "Enriched %s: %d labels, %d auto links, %d entities",
            self.document.url,
            len(self.references),
            added,
            len(graph.mentions),
        )
        return graph
