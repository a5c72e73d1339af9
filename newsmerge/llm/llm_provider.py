"""LLM provider interface and implementations."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

import openai
from openai import OpenAI
from pydantic import ValidationError
from rich.console import Console

from ..errors import CapabilityError
from .models import (
    ArticleBrief,
    BreakingNewsResult,
    CapabilityResult,
    CategorizationResult,
    DuplicateJudgment,
    EntityExtractionResult,
    RewriteResult,
    SourceBundle,
    SynthesisResult,
    parse_json_response,
)
from .prompts import (
    BREAKING_NEWS_PROMPT,
    CATEGORIES_HELP,
    CATEGORIZATION_PROMPT,
    DUPLICATE_DETECTION_PROMPT,
    ENTITY_EXTRACTION_PROMPT,
    EXISTING_ARTICLE_TEMPLATE,
    REWRITE_PROMPT,
    SOURCE_BUNDLE_TEMPLATE,
    SYNTHESIS_PROMPT,
)

console = Console(stderr=True)

R = TypeVar("R", bound=CapabilityResult)


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Every capability either returns a decoded result or raises
    ``CapabilityError``; callers decide on the fallback.
    """

    @abstractmethod
    def categorize(self, title: str, content: str, source: str) -> CategorizationResult:
        """
        Categorize an article.

        Args:
            title: Article title
            content: Article content, already truncated
            source: Source name

        Returns:
            Main category, up to two secondary categories and a confidence
        """
        pass

    @abstractmethod
    def extract_entities(self, content: str) -> EntityExtractionResult:
        """Extract people, organizations, locations and keywords."""
        pass

    @abstractmethod
    def rewrite(self, title: str, content: str, source: str, category: str) -> RewriteResult:
        """Rewrite an article into a title and three body lengths."""
        pass

    @abstractmethod
    def judge_duplicates(
        self,
        article: ArticleBrief,
        candidates: List[ArticleBrief],
        lookback_hours: int = 48,
    ) -> DuplicateJudgment:
        """
        Judge whether an article covers the same event as the candidates.

        Args:
            article: The new article
            candidates: Up to five recent articles with similar titles
            lookback_hours: Window the candidates were drawn from

        Returns:
            Decoded verdict
        """
        pass

    @abstractmethod
    def synthesize(self, bundles: List[SourceBundle]) -> SynthesisResult:
        """Merge several source articles on one event into a single article."""
        pass

    @abstractmethod
    def score_breaking_news(
        self,
        title: str,
        content: str,
        category: str,
        published_at: str,
    ) -> BreakingNewsResult:
        """Rate how urgent an article is."""
        pass

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        pass


class OpenAIProvider(LLMProvider):
    """OpenAI implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        synthesis_model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model for quick tasks
            synthesis_model: Model for rewrite and synthesis, defaults to ``model``
            base_url: Custom base URL (for testing or compatible servers)
            timeout: Per-call timeout in seconds
        """
        # Retries are left to the sweep, never inside a pipeline run
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self.model = model
        self.synthesis_model = synthesis_model or model
        self.total_tokens = 0
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.api_calls = 0
        self.failed_calls = 0

        # Token cost estimates (per 1K tokens)
        self.cost_per_1k_tokens = {
            "gpt-4o": {"input": 0.0025, "output": 0.01},
            "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
            "gpt-4.1": {"input": 0.002, "output": 0.008},
            "gpt-4.1-mini": {"input": 0.0004, "output": 0.0016},
        }

    def _complete_json(
        self,
        task: str,
        prompt: str,
        result_type: Type[R],
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 2048,
    ) -> R:
        """Send one prompt and decode the JSON reply into ``result_type``."""
        self.api_calls += 1
        try:
            response = self.client.chat.completions.create(
                model=model or self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            self.failed_calls += 1
            raise CapabilityError(task, str(e), cause=e) from e

        if response.usage:
            self.total_tokens += response.usage.total_tokens
            self.prompt_tokens += response.usage.prompt_tokens
            self.completion_tokens += response.usage.completion_tokens

        text = response.choices[0].message.content if response.choices else None
        try:
            return result_type.model_validate(parse_json_response(text or ""))
        except (ValueError, ValidationError) as e:
            self.failed_calls += 1
            raise CapabilityError(task, f"unusable response: {e}", cause=e) from e

    def categorize(self, title: str, content: str, source: str) -> CategorizationResult:
        """Categorize article using OpenAI."""
        prompt = CATEGORIZATION_PROMPT.format(
            title=title,
            content=content,
            source=source,
            categories=CATEGORIES_HELP,
        )
        return self._complete_json("categorize", prompt, CategorizationResult, max_tokens=300)

    def extract_entities(self, content: str) -> EntityExtractionResult:
        """Extract entities using OpenAI."""
        prompt = ENTITY_EXTRACTION_PROMPT.format(content=content)
        return self._complete_json("extract_entities", prompt, EntityExtractionResult, max_tokens=800)

    def rewrite(self, title: str, content: str, source: str, category: str) -> RewriteResult:
        """Rewrite article using the synthesis model."""
        prompt = REWRITE_PROMPT.format(title=title, content=content, source=source, category=category)
        return self._complete_json(
            "rewrite",
            prompt,
            RewriteResult,
            model=self.synthesis_model,
            temperature=0.4,
            max_tokens=4096,
        )

    def judge_duplicates(
        self,
        article: ArticleBrief,
        candidates: List[ArticleBrief],
        lookback_hours: int = 48,
    ) -> DuplicateJudgment:
        """Judge duplicates using OpenAI."""
        existing = "\n\n".join(
            EXISTING_ARTICLE_TEMPLATE.format(**candidate.model_dump()) for candidate in candidates
        )
        prompt = DUPLICATE_DETECTION_PROMPT.format(
            title=article.title,
            summary=article.summary,
            source=article.source,
            date=article.date,
            lookback_hours=lookback_hours,
            existing=existing,
        )
        return self._complete_json("judge_duplicates", prompt, DuplicateJudgment, max_tokens=400)

    def synthesize(self, bundles: List[SourceBundle]) -> SynthesisResult:
        """Synthesize a cluster using the synthesis model."""
        sources = "\n\n".join(
            SOURCE_BUNDLE_TEMPLATE.format(
                source_name=b.source_name,
                reliability=b.reliability.value,
                title=b.title,
                published_at=b.published_at,
                content=b.content,
            )
            for b in bundles
        )
        prompt = SYNTHESIS_PROMPT.format(sources=sources)
        return self._complete_json(
            "synthesize",
            prompt,
            SynthesisResult,
            model=self.synthesis_model,
            temperature=0.4,
            max_tokens=4096,
        )

    def score_breaking_news(
        self,
        title: str,
        content: str,
        category: str,
        published_at: str,
    ) -> BreakingNewsResult:
        """Score urgency using OpenAI."""
        prompt = BREAKING_NEWS_PROMPT.format(
            title=title,
            content=content,
            category=category,
            published_at=published_at,
        )
        return self._complete_json("score_breaking_news", prompt, BreakingNewsResult, max_tokens=300)

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        estimated_cost = 0.0
        if self.model in self.cost_per_1k_tokens:
            rates = self.cost_per_1k_tokens[self.model]
            estimated_cost = (
                (self.prompt_tokens / 1000) * rates["input"] +
                (self.completion_tokens / 1000) * rates["output"]
            )

        return {
            "total_tokens": self.total_tokens,
            "api_calls": self.api_calls,
            "failed_calls": self.failed_calls,
            "estimated_cost": estimated_cost,
            "model": self.model,
        }


ScriptedResponse = Any


class MockLLMProvider(LLMProvider):
    """Scripted LLM provider for testing and offline runs.

    ``responses`` maps a task name (``categorize``, ``extract_entities``,
    ``rewrite``, ``judge_duplicates``, ``synthesize``,
    ``score_breaking_news``) to a result model, a plain dict in the wire
    format, an exception to raise, a callable receiving the call's keyword
    arguments, or a list of those consumed one per call. Tasks without a
    scripted response fail with ``CapabilityError``.
    """

    _result_types: Dict[str, Type[CapabilityResult]] = {
        "categorize": CategorizationResult,
        "extract_entities": EntityExtractionResult,
        "rewrite": RewriteResult,
        "judge_duplicates": DuplicateJudgment,
        "synthesize": SynthesisResult,
        "score_breaking_news": BreakingNewsResult,
    }

    def __init__(self, responses: Optional[Dict[str, ScriptedResponse]] = None) -> None:
        """Initialize mock provider."""
        self.responses: Dict[str, ScriptedResponse] = dict(responses or {})
        self.calls: List[tuple] = []

    def calls_for(self, task: str) -> List[Dict[str, Any]]:
        """Keyword arguments of every call made for ``task``."""
        return [kwargs for name, kwargs in self.calls if name == task]

    def _respond(self, task: str, **kwargs: Any) -> Any:
        self.calls.append((task, kwargs))
        if task not in self.responses:
            raise CapabilityError(task, "no scripted response")

        response = self.responses[task]
        if isinstance(response, list):
            if not response:
                raise CapabilityError(task, "scripted responses exhausted")
            response = response.pop(0)
        if callable(response) and not isinstance(response, (BaseException, CapabilityResult)):
            response = response(**kwargs)
        if isinstance(response, CapabilityError):
            raise response
        if isinstance(response, BaseException):
            raise CapabilityError(task, str(response), cause=response) from response

        result_type = self._result_types[task]
        if isinstance(response, result_type):
            return response
        try:
            return result_type.model_validate(response)
        except ValidationError as e:
            raise CapabilityError(task, f"unusable response: {e}", cause=e) from e

    def categorize(self, title: str, content: str, source: str) -> CategorizationResult:
        """Mock categorization."""
        return self._respond("categorize", title=title, content=content, source=source)

    def extract_entities(self, content: str) -> EntityExtractionResult:
        """Mock entity extraction."""
        return self._respond("extract_entities", content=content)

    def rewrite(self, title: str, content: str, source: str, category: str) -> RewriteResult:
        """Mock rewrite."""
        return self._respond("rewrite", title=title, content=content, source=source, category=category)

    def judge_duplicates(
        self,
        article: ArticleBrief,
        candidates: List[ArticleBrief],
        lookback_hours: int = 48,
    ) -> DuplicateJudgment:
        """Mock duplicate judgment."""
        return self._respond(
            "judge_duplicates",
            article=article,
            candidates=candidates,
            lookback_hours=lookback_hours,
        )

    def synthesize(self, bundles: List[SourceBundle]) -> SynthesisResult:
        """Mock synthesis."""
        return self._respond("synthesize", bundles=bundles)

    def score_breaking_news(
        self,
        title: str,
        content: str,
        category: str,
        published_at: str,
    ) -> BreakingNewsResult:
        """Mock urgency scoring."""
        return self._respond(
            "score_breaking_news",
            title=title,
            content=content,
            category=category,
            published_at=published_at,
        )

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": 0,
            "api_calls": len(self.calls),
            "failed_calls": 0,
            "estimated_cost": 0.0,
            "model": "mock",
        }


def create_llm_provider(llm_config: Dict[str, Any]) -> LLMProvider:
    """Build the configured LLM provider."""
    provider = llm_config.get("provider")

    if provider == "openai":
        api_key = llm_config.get("api_key")
        if not api_key:
            console.print("[yellow]Warning: No OpenAI API key found. Using mock LLM provider.[/yellow]")
            return MockLLMProvider()

        return OpenAIProvider(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4o-mini"),
            synthesis_model=llm_config.get("synthesis_model"),
            base_url=llm_config.get("base_url"),
            timeout=llm_config.get("timeout_seconds", 30.0),
        )

    if provider != "mock":
        console.print(f"[yellow]Warning: Unknown LLM provider '{provider}'. Using mock provider.[/yellow]")
    return MockLLMProvider()
