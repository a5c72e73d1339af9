"""Processed article model for the reader-facing feed."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .base import DBModel
from .taxonomy import ArticleCategory, ReliabilityTier, UrgencyLevel


class ExtractedEntities(BaseModel):
    """Named entities found in an article."""

    people: List[str] = Field(default_factory=list)
    organizations: List[str] = Field(default_factory=list)
    places: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)


class SourceReference(BaseModel):
    """Attribution for one contributing raw article."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Article URL at the source")
    reliability: ReliabilityTier = Field(ReliabilityTier.LOW, description="Source reliability tier")


class SourceValue(BaseModel):
    """What one source reported on a contested point."""

    name: str
    value: str

    @field_validator("name", "value", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> str:
        """Figures often come back as numbers."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class Contradiction(BaseModel):
    """A point on which contributing sources disagree."""

    topic: str
    sources: List[SourceValue] = Field(default_factory=list)
    resolution: str = ""


class SynthesisMetadata(BaseModel):
    """Provenance of a multi-source synthesis."""

    cluster_id: int
    article_count: int = Field(..., ge=2)
    factual_consensus: float = Field(..., ge=0.0, le=1.0)
    contradictions: List[Contradiction] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)


class ProcessedArticle(DBModel):
    """Published article, either rewritten from one source or synthesized from a cluster."""

    title: str = Field(..., description="Rewritten title")
    short_summary: str = Field("", description="Short body")
    medium_summary: str = Field("", description="Medium body")
    long_content: str = Field("", description="Long body")
    categories: List[ArticleCategory] = Field(default_factory=list)
    category_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    entities: ExtractedEntities = Field(default_factory=ExtractedEntities)
    source_article_ids: List[int] = Field(..., min_length=1)
    sources: List[SourceReference] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    published_at: datetime = Field(..., description="Earliest publication among sources")
    processed_at: datetime = Field(..., description="When the article was produced")
    image_url: Optional[str] = None
    trending: bool = False
    view_count: int = 0
    is_breaking_news: bool = False
    breaking_news_level: UrgencyLevel = UrgencyLevel.NORMAL
    is_synthesis: bool = False
    synthesis_metadata: Optional[SynthesisMetadata] = None
    raw_article_id: Optional[int] = Field(None, description="Originating raw article for direct-path articles")
    cluster_id: Optional[int] = Field(None, description="Originating cluster for synthesized articles")
