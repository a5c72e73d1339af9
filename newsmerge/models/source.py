"""Source model for news outlets."""

from typing import Optional

from pydantic import Field

from .base import DBModel
from .taxonomy import ReliabilityTier


class Source(DBModel):
    """News source model."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Homepage URL")
    kind: str = Field("website", description="Source kind (rss, website)")
    feed_url: Optional[str] = Field(None, description="RSS feed URL for rss sources")
    reliability: ReliabilityTier = Field(ReliabilityTier.LOW, description="Reliability tier")
    priority: int = Field(2, description="Scheduling priority (1 = highest)", ge=1, le=3)
    enabled: bool = Field(True, description="Whether the source is enabled")
