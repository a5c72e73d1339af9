"""Language-model capabilities used by the pipeline."""

from .llm_provider import LLMProvider, MockLLMProvider, OpenAIProvider, create_llm_provider
from .models import (
    ArticleBrief,
    BreakingNewsResult,
    CategorizationResult,
    DuplicateJudgment,
    EntityExtractionResult,
    RewriteResult,
    SourceBundle,
    SynthesisResult,
    parse_json_response,
)

__all__ = [
    "ArticleBrief",
    "BreakingNewsResult",
    "CategorizationResult",
    "DuplicateJudgment",
    "EntityExtractionResult",
    "LLMProvider",
    "MockLLMProvider",
    "OpenAIProvider",
    "RewriteResult",
    "SourceBundle",
    "SynthesisResult",
    "create_llm_provider",
    "parse_json_response",
]
