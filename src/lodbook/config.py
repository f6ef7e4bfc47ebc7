from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

DEFAULT_CONTEXT = "http://schema.org/"


class TypeConfig(BaseModel):
    """How one record type tag is published."""

    model_config = ConfigDict(populate_by_name=True)

    graph_type: str = Field(alias="type")
    collection: str | None = None
    template: str | None = None


class LodSource(BaseModel):
    data: str = "entities"
    context: str | dict[str, Any] | list[Any] | None = None


class CollectionStyle(BaseModel):
    name: str
    color: str | None = None


class SiteConfig(BaseModel):
    """The subset of the site's `_config.yml` that a build reads."""

    model_config = ConfigDict(extra="ignore")

    url: str = ""
    baseurl: str = ""
    lod_source: LodSource = Field(default_factory=LodSource)
    data_types: dict[str, TypeConfig] = Field(default_factory=dict)
    data_collections: list[CollectionStyle] = Field(default_factory=list)


def load_site_config(path: str | Path) -> SiteConfig:
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read site config {path}: {e}") from e
    if not isinstance(raw, Mapping):
        raise ConfigError(f"site config {path} must be a mapping")
    try:
        return SiteConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid site config {path}: {e}") from e


class TypeRegistry:
    """Maps a record's declared type tag to its graph type, collection and template.

    Unknown tags pass through unchanged: the raw tag doubles as graph type and
    collection so hydration never fails on an unconfigured type.
    """

    def __init__(self, types: Mapping[str, TypeConfig] | None = None):
        self._types: dict[str, TypeConfig] = dict(types or {})

    @classmethod
    def from_config(cls, config: SiteConfig) -> TypeRegistry:
        return cls(config.data_types)

    def get(self, tag: str | None) -> TypeConfig | None:
        if tag is None:
            return None
        return self._types.get(tag)

    def graph_type(self, tag: str) -> str:
        cfg = self.get(tag)
        return cfg.graph_type if cfg else tag

    def collection(self, tag: str) -> str:
        cfg = self.get(tag)
        if cfg and cfg.collection:
            return cfg.collection
        return tag

    def template(self, tag: str) -> str | None:
        cfg = self.get(tag)
        return cfg.template if cfg else None

    def __contains__(self, tag: object) -> bool:
        return tag in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)


def resolve_context(config: SiteConfig, data: Any = None) -> Any:
    """Pick the JSON-LD context for a build.

    Order: context in site config, then `@context` of a JSON-LD record file,
    then schema.org.
    """
    if config.lod_source.context is not None:
        return config.lod_source.context
    if isinstance(data, Mapping) and "@context" in data:
        return data["@context"]
    return DEFAULT_CONTEXT
