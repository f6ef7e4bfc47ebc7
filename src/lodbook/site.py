"""Reading a site source tree and writing build output.

Layout of a source tree:

    _config.yml            site config (url, baseurl, data_types, ...)
    _data/<name>.yml       records; <name> is lod_source.data
    _pages/**/*.html       rendered narrative pages with YAML front matter
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .codec import JsonLdCodec
from .config import SiteConfig, load_site_config, resolve_context
from .context import BuildContext
from .errors import ConfigError
from .knowledge_graph.models import NarrativeDocument
from .knowledge_graph.pipeline import BuildResult
from .knowledge_graph.store import MemoryRecordStore, find_record_file, read_record_file, records_from_data
from .markup.markers import expand_markers
from .settings import LodbookSettings
from .util_text import slugify

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*\r?\n", re.DOTALL)


@dataclass(slots=True)
class Site:
    source: Path
    config: SiteConfig
    ctx: BuildContext
    codec: JsonLdCodec


def load_site(source: str | Path, cfg: LodbookSettings) -> Site:
    source = Path(source)
    config = load_site_config(source / cfg.config_path)
    data = read_record_file(find_record_file(source / cfg.data_dir, config.lod_source.data))
    context = resolve_context(config, data)
    codec = JsonLdCodec(context)
    store = MemoryRecordStore(records_from_data(data, context=context, codec=codec))
    logger.info("Loaded %d records from %s", len(store), source)
    ctx = BuildContext.from_config(config, store, context=context)
    return Site(source=source, config=config, ctx=ctx, codec=codec)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    m = _FRONT_MATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        meta = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid front matter: {e}") from e
    if not isinstance(meta, dict):
        raise ConfigError("front matter must be a mapping")
    return meta, text[m.end():]


def read_document(path: Path, pages_dir: Path, ctx: BuildContext) -> NarrativeDocument:
    meta, body = split_front_matter(path.read_text(encoding="utf-8"))
    url = meta.get("permalink")
    if not url:
        rel = path.relative_to(pages_dir).with_suffix("")
        url = "/" if rel.as_posix() == "index" else f"/{rel.as_posix()}/"
    chapter = meta.get("chapter")
    return NarrativeDocument(
        url=str(url),
        title=str(meta.get("title") or path.stem),
        chapter=str(chapter) if chapter is not None else None,
        html=expand_markers(body, ctx),
    )


def read_documents(pages_dir: str | Path, ctx: BuildContext) -> list[NarrativeDocument]:
    pages_dir = Path(pages_dir)
    if not pages_dir.is_dir():
        logger.warning("No pages directory at %s", pages_dir)
        return []
    return [read_document(p, pages_dir, ctx) for p in sorted(pages_dir.rglob("*.html"))]


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_outputs(result: BuildResult, site: Site, out: str | Path) -> list[Path]:
    """Write enriched pages and the JSON-LD/Turtle of every page and entity."""
    out = Path(out)
    written: list[Path] = []
    context = site.ctx.context

    for doc in result.documents:
        base = out / doc.document.url.strip("/")
        lod = {"@context": context, "@graph": doc.graph.to_graph()}
        files = {
            "index.html": doc.document.html,
            "index.json": site.codec.dumps(site.codec.compact(lod, context)),
            "index.ttl": site.codec.to_turtle(lod, context),
        }
        for filename, text in files.items():
            _write(base / filename, text)
            written.append(base / filename)

    for entity in result.entities:
        base = out / entity.collection / slugify(entity.record.name)
        lod = entity.lod(context)
        files = {
            "index.json": site.codec.dumps(site.codec.compact(lod, context)),
            "index.ttl": site.codec.to_turtle(lod, context),
            "contexts.json": json.dumps([m.to_dict() for m in entity.node.contexts], indent=2, ensure_ascii=False),
        }
        for filename, text in files.items():
            _write(base / filename, text)
            written.append(base / filename)

    logger.info("Wrote %d files to %s", len(written), out)
    return written
