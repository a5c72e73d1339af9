"""Cluster model for grouping raw articles about the same event."""

from typing import List, Optional

from pydantic import Field

from .base import DBModel
from .taxonomy import ArticleCategory


class ArticleCluster(DBModel):
    """A growing set of raw articles believed to cover the same event."""

    member_ids: List[int] = Field(default_factory=list, description="Member raw article IDs")
    canonical_member_id: int = Field(..., description="Smallest seed match ID, unique per cluster")
    primary_category: ArticleCategory = Field(ArticleCategory.SOCIETY, description="Primary category")
    synthesized_article_id: Optional[int] = Field(None, description="Processed article produced by synthesis")

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.member_ids)

    @property
    def is_synthesized(self) -> bool:
        """Whether a synthesis has already been published for this cluster."""
        return self.synthesized_article_id is not None
