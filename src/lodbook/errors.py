"""Errors and build advisories.

Per-record and per-mention problems never abort a build. They are reported
as advisories, logged as they happen and collected for the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class LodbookError(Exception):
    """Base class for errors that stop an operation."""


class ConfigError(LodbookError):
    """Site config or record file is missing or malformed."""


class BuildOrderError(LodbookError):
    """Entity enrichment was requested before every document was processed."""


class GraphAssemblyError(LodbookError):
    """An entity graph was assembled more than once in a build."""


class DuplicateDocumentError(LodbookError):
    """Two narrative pages resolve to the same page URI."""


class AdvisoryKind(str, Enum):
    UNRESOLVED_REFERENCE = "unresolved_reference"
    UNCONFIGURED_TYPE = "unconfigured_type"
    MISSING_IMAGE_RECORD = "missing_image_record"
    UNSUPPORTED_IMAGE_FORMAT = "unsupported_image_format"
    MALFORMED_MARKER = "malformed_marker"


@dataclass(frozen=True, slots=True)
class Advisory:
    kind: AdvisoryKind
    subject: str
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.subject}"
        return f"{text} ({self.detail})" if self.detail else text


class Advisories:
    """Thread-safe collector of non-fatal build problems.

    Hydration runs many times per build, so an identical advisory is logged
    and kept only once.
    """

    def __init__(self) -> None:
        self._items: list[Advisory] = []
        self._seen: set[Advisory] = set()
        self._lock = threading.Lock()

    def report(self, kind: AdvisoryKind, subject: str, detail: str = "") -> Advisory:
        advisory = Advisory(kind=kind, subject=subject, detail=detail)
        with self._lock:
            if advisory in self._seen:
                return advisory
            self._seen.add(advisory)
            self._items.append(advisory)
        logger.warning("%s", advisory)
        return advisory

    def of_kind(self, kind: AdvisoryKind) -> list[Advisory]:
        with self._lock:
            return [a for a in self._items if a.kind == kind]

    def __iter__(self) -> Iterator[Advisory]:
        with self._lock:
            return iter(list(self._items))

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
