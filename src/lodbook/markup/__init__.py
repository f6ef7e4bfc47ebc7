"""Rendered-page processing: references, label links, mentions and markers."""

from .labels import LabelMarkupEngine
from .mentions import MentionExtractor
from .references import ReferenceIndex

__all__ = ["LabelMarkupEngine", "MentionExtractor", "ReferenceIndex"]
