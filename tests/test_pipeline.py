import json

import pytest
from bs4 import BeautifulSoup

from lodbook.context import BuildContext
from lodbook.errors import AdvisoryKind, BuildOrderError, DuplicateDocumentError
from lodbook.knowledge_graph.models import NarrativeDocument
from lodbook.knowledge_graph.pipeline import LodBuild
from lodbook.knowledge_graph.store import MemoryRecordStore
from lodbook.markup.markers import expand_markers
from lodbook.markup.page import PAGE_DATA_ID
from lodbook.settings import LodbookSettings

from conftest import RECORDS

BASE = "https://example.org/book"


def _document(ctx, url, title, chapter, *paragraphs, quote=None):
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    if quote:
        body += f"<blockquote>{quote}</blockquote>"
    html = f'<html><head></head><body><div id="text">{body}</div></body></html>'
    return NarrativeDocument(url=url, title=title, chapter=chapter, html=expand_markers(html, ctx))


@pytest.fixture
def chapters(ctx):
    return [
        _document(
            ctx,
            "/chapter-1/",
            "Arrival",
            "1",
            "{% lod %}James Minahan{% endlod %} came from {% lod %}Ballarat{% endlod %}.",
            "James Minahan stayed.",
            "Nothing here about James.",
            quote="A letter home.",
        ),
        _document(ctx, "/chapter-2/", "Departure", "2", "Then {% lod Ballarat %}the town{% endlod %} emptied."),
    ]


def _entity(result, name):
    return next(e for e in result.entities if e.record.name == name)


def test_pages_are_enriched(ctx, chapters, build_settings):
    result = LodBuild(ctx, cfg=build_settings).run(chapters)
    first = result.documents[0]
    assert first.graph.id == f"{BASE}/chapter-1/"
    graph = first.graph.to_graph()
    assert graph["name"] == "Chapter 1: Arrival"
    assert graph["@type"] == "WebPage"
    assert [m["name"] for m in graph["mentions"]] == ["James Minahan", "Ballarat"]

    soup = BeautifulSoup(first.document.html, "lxml")
    assert [p["id"] for p in soup.select("#text p")] == ["para-0", "para-1", "para-2"]
    assert soup.blockquote["id"] == "quote-0"
    assert soup.select_one("#para-1 a.lod-link")["data-name"] == "James Minahan"
    assert soup.select_one("#para-2 a") is None

    page_data = json.loads(soup.find("script", id=PAGE_DATA_ID).string)
    assert page_data["@context"] == "http://schema.org/"
    assert page_data["@graph"]["@id"] == f"{BASE}/chapter-1/"


def test_entities_link_back_to_mentioning_pages(ctx, chapters, build_settings):
    result = LodBuild(ctx, cfg=build_settings).run(chapters)

    minahan = _entity(result, "James Minahan").node
    assert minahan.to_graph()["mentionedBy"] == [
        {"@id": f"{BASE}/chapter-1/", "name": "Arrival", "@type": "WebPage"}
    ]
    assert [(m.paragraph_id, m.context) for m in minahan.contexts] == [
        ("0", "<em>James Minahan</em> came from Ballarat."),
        ("1", "<em>James Minahan</em> stayed."),
    ]
    assert minahan.main_entity_of_page == f"{BASE}/people/james-minahan/index.html"

    ballarat = _entity(result, "Ballarat").node
    assert [m["@id"] for m in ballarat.to_graph()["mentionedBy"]] == [f"{BASE}/chapter-1/", f"{BASE}/chapter-2/"]
    assert ballarat.contexts[1].context == "Then <em>the town</em> emptied."
    assert ballarat.contexts[1].document_chapter == "2"

    james = _entity(result, "James").node
    assert "mentionedBy" not in james.to_graph()
    assert james.contexts == []


def test_mentions_and_back_references_agree(ctx, chapters, build_settings):
    result = LodBuild(ctx, cfg=build_settings).run(chapters)
    pages = {d.graph.id: d.graph for d in result.documents}
    for entity in result.entities:
        for ref in entity.node.mentioned_by:
            assert pages[ref.id].mentions_entity(entity.node.id)
    for page in pages.values():
        for node in page.mentions:
            entity = next(e for e in result.entities if e.node.id == node.id)
            assert page.id in [ref.id for ref in entity.node.mentioned_by]


def test_stats(ctx, chapters, build_settings):
    result = LodBuild(ctx, cfg=build_settings).run(chapters)
    assert result.stats.documents == 2
    assert result.stats.entities == len(RECORDS)
    assert result.stats.skipped_records == 0
    assert result.stats.mentions == 4
    assert result.advisories == []


def test_entity_phase_waits_for_documents(ctx, chapters, build_settings, store):
    build = LodBuild(ctx, cfg=build_settings)
    build.process_document(chapters[0])
    with pytest.raises(BuildOrderError):
        build.enrich_entity(store.get("James"))
    build.close_documents()
    with pytest.raises(BuildOrderError):
        build.process_document(chapters[1])
    assert build.enrich_entity(store.get("James")) is not None


def test_unconfigured_records_are_skipped(site_config, build_settings):
    store = MemoryRecordStore([*RECORDS, {"name": "Endeavour", "type": "ship"}])
    ctx = BuildContext.from_config(site_config, store)
    result = LodBuild(ctx, cfg=build_settings).run([])
    assert result.stats.skipped_records == 1
    assert "Endeavour" not in [e.record.name for e in result.entities]
    assert [a.subject for a in result.advisories if a.kind == AdvisoryKind.UNCONFIGURED_TYPE] == ["ship"]


def test_entity_result_carries_page_details(ctx, build_settings):
    result = LodBuild(ctx, cfg=build_settings).run([])
    minahan = _entity(result, "James Minahan")
    assert minahan.collection == "people"
    assert minahan.template == "person"
    lod = minahan.lod("http://schema.org/")
    assert lod["@context"] == "http://schema.org/"
    assert lod["@graph"]["@id"] == f"{BASE}/people/james-minahan/"


def test_collection_styles_are_opt_in(ctx, site_config, chapters):
    cfg = LodbookSettings(inject_collection_styles=True)
    result = LodBuild(ctx, collections=site_config.data_collections, cfg=cfg).run(chapters[:1])
    style = BeautifulSoup(result.documents[0].document.html, "lxml").head.style
    assert ".people { background-color: #aa3333" in style.string


def test_no_styles_by_default(ctx, site_config, chapters, build_settings):
    result = LodBuild(ctx, collections=site_config.data_collections, cfg=build_settings).run(chapters[:1])
    assert BeautifulSoup(result.documents[0].document.html, "lxml").style is None


def test_second_occurrence_in_the_same_paragraph(site_config, build_settings):
    ctx = BuildContext.from_config(site_config, MemoryRecordStore([{"name": "James Minahan", "type": "person"}]))
    doc = _document(
        ctx,
        "/chapter-3/",
        "Return",
        "3",
        "{% lod %}James Minahan{% endlod %} arrived in 1891. Later, James Minahan left.",
    )
    result = LodBuild(ctx, cfg=build_settings).run([doc])

    links = BeautifulSoup(doc.html, "lxml").select("#para-0 a.lod-link")
    assert [a.get_text() for a in links] == ["James Minahan", "James Minahan"]
    assert {a["href"] for a in links} == {"/book/people/james-minahan/"}

    node = result.entities[0].node
    assert [m.context for m in node.contexts] == [
        "<em>James Minahan</em> arrived in 1891. Later, James",
        "Minahan arrived in 1891. Later, <em>James Minahan</em> left.",
    ]
    assert node.to_graph()["mentionedBy"] == [
        {"@id": f"{BASE}/chapter-3/", "name": "Return", "@type": "WebPage"}
    ]


def test_pages_must_have_distinct_urls(ctx, chapters, build_settings):
    build = LodBuild(ctx, cfg=build_settings)
    build.process_document(chapters[0])
    twin = NarrativeDocument(url="/chapter-1/", title="Copy", chapter="9", html="<p></p>")
    with pytest.raises(DuplicateDocumentError):
        build.process_document(twin)
    assert len(build.documents) == 1
