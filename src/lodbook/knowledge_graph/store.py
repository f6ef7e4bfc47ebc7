from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import yaml

from ..errors import ConfigError
from .models import NAME_KEY, Record

if TYPE_CHECKING:
    from ..codec import JsonLdCodec

logger = logging.getLogger(__name__)

RECORD_FILE_SUFFIXES = (".yml", ".yaml", ".json", ".jsonld")


class RecordStore(Protocol):
    """Read-only lookup of entity records by exact name."""

    def get(self, name: str) -> Record | None: ...

    def __contains__(self, name: object) -> bool: ...

    def __iter__(self) -> Iterator[Record]: ...


class MemoryRecordStore:
    """Name-keyed records held in memory, in file order.

    Names are case-sensitive. When two records share a name the first one
    wins, matching a linear scan of the record file.
    """

    def __init__(self, records: Iterable[Record | Mapping[str, Any]] = ()):
        self._records: dict[str, Record] = {}
        for item in records:
            record = item if isinstance(item, Record) else Record.from_mapping(item)
            if record.name in self._records:
                logger.warning("Duplicate record name %r; keeping the first", record.name)
                continue
            self._records[record.name] = record

    def get(self, name: str) -> Record | None:
        return self._records.get(name)

    def names(self) -> list[str]:
        return list(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


def find_record_file(data_dir: str | Path, data_name: str) -> Path:
    data_dir = Path(data_dir)
    for suffix in RECORD_FILE_SUFFIXES:
        candidate = data_dir / f"{data_name}{suffix}"
        if candidate.is_file():
            return candidate
    raise ConfigError(f"no record file named {data_name!r} in {data_dir}")


def read_record_file(path: str | Path) -> Any:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix in (".json", ".jsonld"):
            return json.loads(text)
        return yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read record file {path}: {e}") from e


def records_from_data(data: Any, *, context: Any = None, codec: JsonLdCodec | None = None) -> list[dict[str, Any]]:
    """Return the list of record mappings held by a parsed record file.

    A JSON-LD document with `@graph` is compacted against the build context
    first so that its keys line up with plain YAML records.
    """
    if isinstance(data, Mapping) and "@graph" in data:
        if codec is not None:
            compacted = codec.compact(data, context)
            graph = compacted.get("@graph")
            if graph is None:
                graph = [{k: v for k, v in compacted.items() if k != "@context"}]
        else:
            graph = data["@graph"]
    else:
        graph = data
    if graph is None:
        return []
    if isinstance(graph, Mapping):
        graph = [graph]
    if not isinstance(graph, list):
        raise ConfigError("record data must be a list of mappings or a JSON-LD @graph")

    records: list[dict[str, Any]] = []
    for item in graph:
        if not isinstance(item, Mapping) or item.get(NAME_KEY) is None:
            logger.warning("Skipping record without a name: %r", item)
            continue
        records.append(dict(item))
    return records
