from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_CONTEXT, SiteConfig, TypeRegistry
from .errors import Advisories
from .knowledge_graph.models import Record
from .knowledge_graph.store import RecordStore
from .util_text import slugify


@dataclass(slots=True)
class BuildContext:
    """Everything a core operation may read during one build.

    The record store and type registry are shared and read-only; advisories
    is the only thing written through the context.
    """

    store: RecordStore
    types: TypeRegistry
    site_url: str = ""
    base_url: str = ""
    context: Any = DEFAULT_CONTEXT
    advisories: Advisories = field(default_factory=Advisories)

    @classmethod
    def from_config(cls, config: SiteConfig, store: RecordStore, *, context: Any = None) -> BuildContext:
        return cls(
            store=store,
            types=TypeRegistry.from_config(config),
            site_url=config.url.rstrip("/"),
            base_url=config.baseurl.rstrip("/"),
            context=context if context is not None else DEFAULT_CONTEXT,
        )

    def lookup(self, name: str) -> Record | None:
        return self.store.get(name)

    def entity_path(self, collection: str, name: str) -> str:
        return f"{self.base_url}/{collection}/{slugify(name)}/"

    def entity_uri(self, collection: str, name: str) -> str:
        return f"{self.site_url}{self.entity_path(collection, name)}"

    def page_uri(self, path: str) -> str:
        return f"{self.site_url}{self.base_url}{path}"
