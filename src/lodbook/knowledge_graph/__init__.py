"""Entity records and their linked-data graphs.

This package provides:
- Record and graph node models
- A read-only record store
- The compiler that hydrates records into graph nodes
- The assembler that folds page mentions back into entity graphs
- The two-phase build pipeline

Only models and store are imported here; the compiler and pipeline depend on
`lodbook.context`, which itself imports these models.
"""

from .models import DocumentGraph, GraphNode, Mention, MentionedBy, Record
from .store import MemoryRecordStore, RecordStore

__all__ = ["DocumentGraph", "GraphNode", "Mention", "MentionedBy", "Record", "MemoryRecordStore", "RecordStore"]
