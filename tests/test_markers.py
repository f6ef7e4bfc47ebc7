from bs4 import BeautifulSoup

from lodbook.errors import AdvisoryKind
from lodbook.markup.markers import expand_markers


def _link(html: str):
    return BeautifulSoup(html, "lxml").a


def test_explicit_name(ctx):
    link = _link(expand_markers("{% lod James Minahan %}Minahan{% endlod %}", ctx))
    assert link.get_text() == "Minahan"
    assert link["data-name"] == "James Minahan"
    assert link["data-collection"] == "people"
    assert link["property"] == "name"
    assert link["href"] == "/book/people/james-minahan/"
    assert link["class"] == ["lod-link"]


def test_content_is_the_name(ctx):
    link = _link(expand_markers("{%- lod -%}Ballarat{%- endlod -%}", ctx))
    assert link["data-name"] == "Ballarat"
    assert link["href"] == "/book/places/ballarat/"


def test_quoted_name(ctx):
    link = _link(expand_markers('{% lod "James" %}Jim{% endlod %}', ctx))
    assert link["data-name"] == "James"


def test_unresolved_marker_keeps_its_content(ctx):
    out = expand_markers("Met {% lod Nobody %}a stranger{% endlod %}.", ctx)
    assert out == "Met a stranger."
    [advisory] = ctx.advisories.of_kind(AdvisoryKind.MALFORMED_MARKER)
    assert advisory.subject == "Nobody"


def test_empty_marker(ctx):
    assert expand_markers("{% lod %}{% endlod %}", ctx) == ""
    assert ctx.advisories.of_kind(AdvisoryKind.MALFORMED_MARKER)[0].subject == "<empty>"


def test_ignore_marker(ctx):
    out = expand_markers("{% lod_ignore %}James{% endlod_ignore %} wrote", ctx)
    assert out == '<span class="lod-ignore">James</span> wrote'
