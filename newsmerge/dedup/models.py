"""Duplicate detection results."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import RawArticle, Recommendation


class DuplicateVerdict(BaseModel):
    """Outcome of checking a new article against recent coverage."""

    is_duplicate: bool
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    matching_article_ids: List[int] = Field(default_factory=list)
    matching_summary: Optional[str] = None
    recommendation: Recommendation
    confidence: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def exact(cls, matching_ids: List[int]) -> "DuplicateVerdict":
        return cls(
            is_duplicate=True,
            similarity_score=1.0,
            matching_article_ids=matching_ids,
            matching_summary="Exact duplicate detected by content hash",
            recommendation=Recommendation.SKIP,
            confidence=0.99,
        )

    @classmethod
    def novel(cls) -> "DuplicateVerdict":
        return cls(
            is_duplicate=False,
            similarity_score=0.0,
            recommendation=Recommendation.SEPARATE,
            confidence=0.95,
        )


class TitleCandidate(BaseModel):
    """A recent article whose title resembles the new one."""

    article: RawArticle
    score: float
