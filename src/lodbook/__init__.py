"""
LODBook - narrative pages cross-linked with entity records, published as linked open data
"""

from .config import SiteConfig, TypeRegistry, load_site_config
from .context import BuildContext
from .errors import Advisories, Advisory, AdvisoryKind, LodbookError
from .knowledge_graph.compiler import GraphCompiler
from .knowledge_graph.models import GraphNode, Mention, NarrativeDocument, Record
from .knowledge_graph.pipeline import BuildResult, LodBuild
from .knowledge_graph.store import MemoryRecordStore

__version__ = "0.3.0"

__all__ = [
    "Advisories",
    "Advisory",
    "AdvisoryKind",
    "BuildContext",
    "BuildResult",
    "GraphCompiler",
    "GraphNode",
    "LodBuild",
    "LodbookError",
    "MemoryRecordStore",
    "Mention",
    "NarrativeDocument",
    "Record",
    "SiteConfig",
    "TypeRegistry",
    "load_site_config",
]
