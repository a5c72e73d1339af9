"""Article processing pipeline."""

from .enrichment import ArticleEnricher
from .models import DuplicateAction, PipelineState, ProcessingResult, SweepReport
from .orchestrator import ArticleProcessor, PipelineStage, RunTrace
from .sweep import UnprocessedSweep

__all__ = [
    "ArticleEnricher",
    "ArticleProcessor",
    "DuplicateAction",
    "PipelineStage",
    "PipelineState",
    "ProcessingResult",
    "RunTrace",
    "SweepReport",
    "UnprocessedSweep",
]
