from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from lodbook.config import SiteConfig
from lodbook.context import BuildContext
from lodbook.knowledge_graph.compiler import GraphCompiler
from lodbook.knowledge_graph.store import MemoryRecordStore
from lodbook.settings import LodbookSettings

SITE_CONFIG = {
    "url": "https://example.org",
    "baseurl": "/book",
    "data_types": {
        "person": {"type": "Person", "collection": "people", "template": "person"},
        "place": {"type": "Place", "collection": "places", "template": "place"},
        "image": {"type": "ImageObject", "collection": "images"},
    },
    "data_collections": [{"name": "people", "color": "#aa3333"}],
}

RECORDS = [
    {
        "name": "James Minahan",
        "type": "person",
        "birthDate": "1865-04-02",
        "birthPlace": {"name": "Ballarat"},
        "knows": [{"name": "James"}],
        "image": {"name": "Portrait of James Minahan"},
    },
    {"name": "James", "type": "person"},
    {"name": "Ballarat", "type": "place"},
    {"name": "Art", "type": "place"},
    {"name": "Portrait of James Minahan", "type": "image", "image": "minahan.jpg"},
]


@pytest.fixture
def site_config() -> SiteConfig:
    return SiteConfig.model_validate(SITE_CONFIG)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore(RECORDS)


@pytest.fixture
def ctx(site_config, store) -> BuildContext:
    return BuildContext.from_config(site_config, store)


@pytest.fixture
def compiler(ctx) -> GraphCompiler:
    return GraphCompiler(ctx)


@pytest.fixture
def build_settings() -> LodbookSettings:
    return LodbookSettings(log_level="DEBUG")


@pytest.fixture
def page():
    """Wrap paragraph HTML in the page skeleton the default selectors expect."""

    def _page(*paragraphs: str) -> str:
        body = "".join(f"<p>{p}</p>" for p in paragraphs)
        return f'<html><head><title>t</title></head><body><div id="text">{body}</div></body></html>'

    return _page


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A complete source tree with one chapter page."""
    root = tmp_path / "site"
    (root / "_data").mkdir(parents=True)
    (root / "_pages").mkdir()
    (root / "_config.yml").write_text(yaml.safe_dump(SITE_CONFIG))
    (root / "_data" / "entities.yml").write_text(yaml.safe_dump(RECORDS, allow_unicode=True))
    (root / "_pages" / "chapter-1.html").write_text(
        "---\ntitle: Arrival\nchapter: 1\n---\n"
        '<html><head></head><body><div id="text">'
        "<p>{% lod James Minahan %}Minahan{% endlod %} came from {% lod %}Ballarat{% endlod %}.</p>"
        "<p>Minahan stayed.</p>"
        "</div></body></html>\n"
    )
    return root
