"""Inputs and decoded outputs of the language-model capabilities."""

import json
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models import (
    ArticleCategory,
    Contradiction,
    ExtractedEntities,
    Recommendation,
    ReliabilityTier,
    UrgencyLevel,
    normalize_category,
)


def clamp_unit(value: Any, default: float) -> float:
    """Coerce a score to a float in [0, 1]; missing values take the default."""
    if value is None or value == "":
        return default
    return min(1.0, max(0.0, float(value)))


def _names(items: Any) -> List[str]:
    """Accept either plain strings or objects carrying a ``name``."""
    names = []
    for item in items or []:
        if isinstance(item, dict):
            item = item.get("name")
        if isinstance(item, str) and item.strip():
            names.append(item.strip())
    return names


_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_response(text: str) -> Any:
    """
    Extract the JSON object from a model reply.

    Tolerates markdown code fences and prose around the object.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    cleaned = _FENCE.sub("", (text or "").strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("no JSON object in response")
    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON in response: {e}") from e


class CapabilityResult(BaseModel):
    """Base for decoded capability replies (camelCase keys on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleBrief(BaseModel):
    """Compact description of an article handed to duplicate judgment."""

    id: Optional[int] = None
    title: str
    summary: str = ""
    source: str = ""
    date: str = ""


class SourceBundle(BaseModel):
    """One cluster member as handed to synthesis."""

    source_name: str
    reliability: ReliabilityTier
    title: str
    content: str
    published_at: str


class CategorizationResult(CapabilityResult):
    main_category: ArticleCategory = ArticleCategory.SOCIETY
    secondary_categories: List[ArticleCategory] = Field(default_factory=list)
    confidence: float = 0.8
    reasoning: str = ""

    @field_validator("main_category", mode="before")
    @classmethod
    def normalize_main(cls, v: Any) -> ArticleCategory:
        return normalize_category(v)

    @field_validator("secondary_categories", mode="before")
    @classmethod
    def normalize_secondary(cls, v: Any) -> List[ArticleCategory]:
        """Keep at most two known secondary categories."""
        categories = []
        for item in v or []:
            category = normalize_category(item)
            if category not in categories:
                categories.append(category)
        return categories[:2]

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v, 0.8)

    @property
    def categories(self) -> List[ArticleCategory]:
        """Main category first, secondaries after, without repeats."""
        return [self.main_category] + [c for c in self.secondary_categories if c != self.main_category]


class EntityExtractionResult(CapabilityResult):
    people: List[str] = Field(default_factory=list)
    organizations: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)

    @field_validator("people", "organizations", "locations", "keywords", mode="before")
    @classmethod
    def flatten_names(cls, v: Any) -> List[str]:
        return _names(v)

    def to_entities(self) -> ExtractedEntities:
        return ExtractedEntities(
            people=self.people,
            organizations=self.organizations,
            places=self.locations,
            keywords=self.keywords,
        )


class KeyQuote(CapabilityResult):
    text: str
    author: str = ""
    role: str = ""


class RewriteResult(CapabilityResult):
    optimized_title: str = ""
    short_version: str = ""
    medium_version: str = ""
    long_version: str = ""
    key_quotes: List[KeyQuote] = Field(default_factory=list)
    suggested_tags: List[str] = Field(default_factory=list)


class DuplicateJudgment(CapabilityResult):
    is_duplicate: bool = False
    similarity_score: float = 0.0
    matching_article_ids: List[int] = Field(default_factory=list)
    matching_summary: Optional[str] = None
    recommendation: Recommendation = Recommendation.SEPARATE
    confidence: float = 0.5

    @field_validator("similarity_score", mode="before")
    @classmethod
    def clamp_similarity(cls, v: Any) -> float:
        return clamp_unit(v, 0.0)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v, 0.5)

    @field_validator("recommendation", mode="before")
    @classmethod
    def known_recommendation(cls, v: Any) -> Recommendation:
        """Anything outside the closed set means keep the article separate."""
        if isinstance(v, str):
            try:
                return Recommendation(v.strip().upper())
            except ValueError:
                pass
        return Recommendation.SEPARATE

    @field_validator("matching_article_ids", mode="before")
    @classmethod
    def integer_ids(cls, v: Any) -> List[int]:
        """Drop ids that are not integers, models sometimes echo titles."""
        ids = []
        if v is None:
            return ids
        if not isinstance(v, (list, tuple)):
            v = [v]
        for item in v:
            try:
                ids.append(int(item))
            except (TypeError, ValueError):
                continue
        return ids


class SourceAnalysis(CapabilityResult):
    source: str
    reliability: str = ""
    unique_contribution: str = ""


class SynthesisResult(CapabilityResult):
    synthesized_title: str = Field(..., min_length=1)
    synthesized_short: str = ""
    synthesized_medium: str = ""
    synthesized_long: str = ""
    sources_analysis: List[SourceAnalysis] = Field(default_factory=list)
    factual_consensus: float = 0.8
    contradictions: List[Contradiction] = Field(default_factory=list)
    key_facts: List[str] = Field(default_factory=list)
    confidence: float = 0.7

    @field_validator("factual_consensus", mode="before")
    @classmethod
    def clamp_consensus(cls, v: Any) -> float:
        return clamp_unit(v, 0.8)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v, 0.7)


class BreakingNewsResult(CapabilityResult):
    is_breaking_news: bool = False
    urgency_level: UrgencyLevel = UrgencyLevel.NORMAL
    notification_title: Optional[str] = None
    notification_body: Optional[str] = None
    target_audience: str = "all"
    reasoning: str = ""
    confidence: float = 0.5

    @field_validator("urgency_level", mode="before")
    @classmethod
    def known_urgency(cls, v: Any) -> UrgencyLevel:
        if isinstance(v, str):
            try:
                return UrgencyLevel(v.strip().upper())
            except ValueError:
                pass
        return UrgencyLevel.NORMAL

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v, 0.5)
