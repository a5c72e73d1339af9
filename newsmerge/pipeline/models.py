"""Pipeline states and run results."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import ArticleCategory


class PipelineState(str, Enum):
    """Where a processing run ended up."""

    FETCHED = "FETCHED"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    DUPLICATE_SKIP = "DUPLICATE_SKIP"
    DUPLICATE_MERGE = "DUPLICATE_MERGE"
    THRESHOLD_NOT_MET = "THRESHOLD_NOT_MET"
    SYNTHESIZED = "SYNTHESIZED"
    NOVEL = "NOVEL"
    CATEGORIZED = "CATEGORIZED"
    ENTITIES_EXTRACTED = "ENTITIES_EXTRACTED"
    REWRITTEN = "REWRITTEN"
    BREAKING_SCORED = "BREAKING_SCORED"
    PUBLISHED = "PUBLISHED"
    FAILED = "FAILED"


class DuplicateAction(str, Enum):
    """What happened to an article recognised as a duplicate."""

    SKIPPED = "SKIPPED"
    MERGED = "MERGED"
    UPDATED = "UPDATED"


class ProcessingResult(BaseModel):
    """Outcome of one processing run for a raw article."""

    raw_article_id: int
    success: bool
    state: PipelineState
    article_id: Optional[int] = Field(None, description="Processed article produced by this run")
    is_duplicate: bool = False
    duplicate_action: Optional[DuplicateAction] = None
    cluster_id: Optional[int] = None
    categories: List[ArticleCategory] = Field(default_factory=list)
    is_breaking_news: bool = False
    processing_time_ms: int = 0
    error: Optional[str] = None
    reached_state: Optional[PipelineState] = Field(None, description="Furthest state reached before the run ended")
    stages: Dict[str, float] = Field(default_factory=dict, description="Stage durations in milliseconds")


class SweepReport(BaseModel):
    """Summary of one sweep over unprocessed articles."""

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    merged: int = 0
    published_ids: List[int] = Field(default_factory=list)
    results: List[ProcessingResult] = Field(default_factory=list)
