"""Raw article model for ingested, unprocessed items."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class RawArticle(DBModel):
    """One scraped or fetched article from a single source."""

    source_id: Optional[int] = Field(None, description="Foreign key to sources table")
    source_name: str = Field(..., description="Denormalized source name")
    title: str = Field(..., description="Original title")
    content: str = Field("", description="Full text content")
    url: str = Field(..., description="Canonical URL of the article")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    ingested_at: datetime = Field(..., description="When the article was ingested")
    image_url: Optional[str] = Field(None, description="Lead image URL")
    author: Optional[str] = Field(None, description="Byline")
    content_hash: str = Field(..., description="Fingerprint of normalized title and content prefix")
    processed: bool = Field(False, description="Whether the pipeline has handled this article")
    skipped: bool = Field(False, description="Whether it was dropped as an exact duplicate")
    processed_at: Optional[datetime] = Field(None, description="When processing finished")
