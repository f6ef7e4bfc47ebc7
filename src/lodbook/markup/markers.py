"""Explicit marker and ignore marker rendering.

In page source an author links a name to its record with

    {% lod James Minahan %}Minahan{% endlod %}    (explicit name)
    {% lod %}James Minahan{% endlod %}            (content is the name)

and protects text from automatic linking with

    {% lod_ignore %}James{% endlod_ignore %}
"""

from __future__ import annotations

import html
import re

from ..context import BuildContext
from ..errors import AdvisoryKind
from ..knowledge_graph.compiler import DEFAULT_TYPE_TAG
from .references import IGNORE_CLASS, LINK_CLASS

LOD_TAG_RE = re.compile(
    r"{%-?\s*lod(?:\s+(?P<name>[^%]*?))?\s*-?%}(?P<content>.*?){%-?\s*endlod\s*-?%}",
    re.DOTALL,
)
IGNORE_TAG_RE = re.compile(
    r"{%-?\s*lod_ignore\s*-?%}(?P<content>.*?){%-?\s*endlod_ignore\s*-?%}",
    re.DOTALL,
)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def render_marker(content: str, name: str | None, ctx: BuildContext) -> str:
    """Render an explicit marker as an entity link, or as bare content if
    the name does not resolve."""
    name = (name or "").strip().strip("\"'") or content.strip()
    if not name:
        ctx.advisories.report(AdvisoryKind.MALFORMED_MARKER, "<empty>", "marker has no name or content")
        return content
    record = ctx.lookup(name)
    if record is None:
        ctx.advisories.report(AdvisoryKind.MALFORMED_MARKER, name, "no record with this name")
        return content
    collection = ctx.types.collection(record.type or DEFAULT_TYPE_TAG)
    url = ctx.entity_path(collection, name)
    return (
        f'<a class="{LINK_CLASS}" data-name="{_attr(name)}" data-collection="{_attr(collection)}"'
        f' property="name" href="{_attr(url)}">{content}</a>'
    )


def render_ignore(content: str) -> str:
    return f'<span class="{IGNORE_CLASS}">{content}</span>'


def expand_markers(text: str, ctx: BuildContext) -> str:
    """Expand `lod` and `lod_ignore` tags left in page source."""
    text = LOD_TAG_RE.sub(lambda m: render_marker(m.group("content"), m.group("name"), ctx), text)
    return IGNORE_TAG_RE.sub(lambda m: render_ignore(m.group("content")), text)
