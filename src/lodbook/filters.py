"""Helpers for page templates that display records and graphs.

Template rendering itself happens elsewhere; these are plain functions a
template environment can register as filters. Register each one by name,
binding the build context first for those that take one, e.g.
`env.filters["lod_list"] = functools.partial(lod_list, ctx=ctx)`.
"""

from __future__ import annotations

import json
import random
from collections.abc import Mapping, Sequence
from datetime import date
from html import escape
from pathlib import PurePosixPath
from typing import Any

from .config import TypeRegistry
from .context import BuildContext
from .errors import AdvisoryKind
from .knowledge_graph.compiler import DEFAULT_TYPE_TAG
from .knowledge_graph.models import ID_KEYS, Record

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")
UNSUPPORTED_IMAGE_EXTENSIONS = (".tif", ".tiff", ".pdf")


def lod_url(name: str, collection: str, ctx: BuildContext) -> str:
    return ctx.entity_uri(collection, name)


def collection_of(record: Record | Mapping[str, Any], registry: TypeRegistry) -> str:
    tag = record.type if isinstance(record, Record) else record.get("type")
    return registry.collection(tag or DEFAULT_TYPE_TAG)


def check_extension(image: str, ctx: BuildContext) -> str | None:
    extension = PurePosixPath(image).suffix.lower()
    if extension in IMAGE_EXTENSIONS:
        return image
    if extension in UNSUPPORTED_IMAGE_EXTENSIONS:
        ctx.advisories.report(AdvisoryKind.UNSUPPORTED_IMAGE_FORMAT, image)
    return None


def image_link(image: Any, ctx: BuildContext) -> str | None:
    """Filename for an image value.

    Images are usually linked by the name of an image record, so a mapping is
    resolved to that record's `image` file; a plain string is taken as the
    filename itself.
    """
    if isinstance(image, Mapping):
        image_name = image.get("name")
        if not image_name:
            return None
        record = ctx.lookup(image_name)
        if record is not None and record.get("image"):
            return str(record.get("image"))
        ctx.advisories.report(AdvisoryKind.MISSING_IMAGE_RECORD, str(image_name))
        return None
    if not image:
        return None
    return check_extension(str(image), ctx)


def add_image_links(things: Sequence[dict[str, Any]], ctx: BuildContext) -> Sequence[dict[str, Any]]:
    for thing in things:
        if not thing.get("image"):
            continue
        image_file = image_link(thing["image"], ctx)
        if image_file:
            thing["image_file"] = image_file
    return things


def format_date(value: Any) -> str:
    """ISO date as display text: `1891-03-05` -> ` 5 March 1891`,
    `1891-03` -> `March 1891`. Anything else is returned as is."""
    text = str(value)
    parts = text.split("-")
    try:
        if len(parts) == 3:
            d = date.fromisoformat(text)
            return f"{d.day:>2} {d:%B} {d.year}"
        if len(parts) == 2:
            d = date.fromisoformat(f"{text}-01")
            return f"{d:%B} {d.year}"
    except ValueError:
        pass
    return text


def _has_id(value: Mapping[str, Any]) -> bool:
    return any(k in value for k in ID_KEYS)


def _id_of(value: Mapping[str, Any]) -> str:
    return str(value.get("@id") or value.get("id"))


def _link_for_name(name: str, ctx: BuildContext) -> str:
    record = ctx.lookup(name)
    if record is None:
        return escape(name)
    collection = ctx.types.collection(record.type or DEFAULT_TYPE_TAG)
    return f'<a href="{escape(ctx.entity_path(collection, name))}">{escape(name)}</a>\n'


def lod_item(value: Any, ctx: BuildContext) -> Any:
    if not isinstance(value, Mapping):
        return value
    if "name" in value and not _has_id(value):
        return _link_for_name(str(value["name"]), ctx)
    if "name" in value:
        return f'<a href="{escape(_id_of(value))}">{escape(str(value["name"]))}</a>\n'
    if _has_id(value):
        return f'<a href="{escape(_id_of(value))}">{escape(_id_of(value))}</a>\n'
    return None


def _format_list_item(value: Any, ctx: BuildContext) -> str:
    if isinstance(value, Mapping):
        if "name" in value or _has_id(value):
            return f"<li>{lod_item(value, ctx)}</li>\n"
        return "".join(f"<li>{escape(str(k))}: {escape(str(v))}</li>\n" for k, v in value.items())
    text = str(value)
    if text.startswith(("http://", "https://")):
        return f'<li><a href="{escape(text)}">{escape(text)}</a></li>\n'
    return f"<li>{escape(text)}</li>\n"


def lod_list(values: Any, label: str, ctx: BuildContext) -> str | None:
    """HTML list of the values of one graph property, under a heading."""
    if not values:
        return None
    output = f"<h4 class='title lod-list-title'>{escape(label.capitalize())}</h4>\n<ul class='lod-list'>\n"
    items = values if isinstance(values, list) else [values]
    for value in items:
        output += _format_list_item(value, ctx)
    return output + "</ul>\n"


def jsonldify(data: Any) -> str:
    body = json.dumps(data, indent=2, ensure_ascii=False, default=str).replace("</", "<\\/")
    return f'<script type="application/ld+json">\n{body}\n</script>'


def shuffle(values: Sequence[Any], rng: random.Random | None = None) -> list[Any]:
    out = list(values)
    (rng or random).shuffle(out)
    return out
