"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class RawItem(BaseModel):
    """One item read from a source, before it becomes a raw article."""

    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Article URL")
    published_at: Optional[datetime] = Field(None, description="Publication date")
    summary: str = Field("", description="Text supplied by the feed")
    image_url: Optional[str] = Field(None, description="Lead image")
    author: Optional[str] = Field(None, description="Byline")
    source_name: str = Field(..., description="Source name")
    source_id: Optional[int] = Field(None, description="Source database ID")


class ArticleContent(BaseModel):
    """Extracted article content."""

    url: str = Field(..., description="Article URL")
    canonical_url: str = Field(..., description="Canonical URL")
    title: str = Field(..., description="Article title")
    text: str = Field("", description="Extracted main text")
    published_at: Optional[datetime] = Field(None, description="Publication date")
    image_url: Optional[str] = Field(None, description="Lead image from page metadata")
    fetch_success: bool = Field(True, description="Whether fetch was successful")
    error: Optional[str] = Field(None, description="Error message if failed")


class IngestReport(BaseModel):
    """Outcome of ingesting one source."""

    source_name: str
    fetched: int = 0
    inserted: int = 0
    already_stored: int = 0
    completed_from_page: int = 0
    inserted_ids: List[int] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None
