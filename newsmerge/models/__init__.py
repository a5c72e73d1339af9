"""Data models for newsmerge."""

from .cluster import ArticleCluster
from .processed_article import (
    Contradiction,
    ExtractedEntities,
    ProcessedArticle,
    SourceReference,
    SourceValue,
    SynthesisMetadata,
)
from .raw_article import RawArticle
from .source import Source
from .taxonomy import (
    ArticleCategory,
    DEFAULT_CATEGORY,
    Recommendation,
    ReliabilityTier,
    UrgencyLevel,
    normalize_category,
)

__all__ = [
    "ArticleCategory",
    "ArticleCluster",
    "Contradiction",
    "DEFAULT_CATEGORY",
    "ExtractedEntities",
    "ProcessedArticle",
    "RawArticle",
    "Recommendation",
    "ReliabilityTier",
    "Source",
    "SourceReference",
    "SourceValue",
    "SynthesisMetadata",
    "UrgencyLevel",
    "normalize_category",
]
