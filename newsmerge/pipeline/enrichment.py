"""Per-article capability calls, each with its own fallback."""

from typing import Iterable, Optional

from rich.console import Console

from ..config import EnrichmentConfig
from ..errors import CapabilityError
from ..llm import BreakingNewsResult, CategorizationResult, LLMProvider, RewriteResult
from ..models import DEFAULT_CATEGORY, ArticleCategory, ExtractedEntities, RawArticle, UrgencyLevel

console = Console(stderr=True)


class ArticleEnricher:
    """Categorize, extract, rewrite and score one raw article.

    A failing capability never fails the article: every call degrades to a
    conservative default and the run carries on.
    """

    def __init__(
        self,
        llm_provider: LLMProvider,
        breaking_keywords: Iterable[str],
        config: Optional[EnrichmentConfig] = None,
    ) -> None:
        self.llm_provider = llm_provider
        self.breaking_keywords = tuple(k.lower() for k in breaking_keywords)
        self.config = config or EnrichmentConfig()

    def _content(self, article: RawArticle) -> str:
        return article.content[:self.config.max_article_length]

    def categorize(self, article: RawArticle) -> CategorizationResult:
        try:
            return self.llm_provider.categorize(article.title, self._content(article), article.source_name)
        except CapabilityError as e:
            console.print(f"[yellow]Categorization failed for article {article.id}: {e}[/yellow]")
            return CategorizationResult(
                main_category=DEFAULT_CATEGORY,
                confidence=0.5,
                reasoning="Default category (categorization unavailable)",
            )

    def extract_entities(self, article: RawArticle) -> ExtractedEntities:
        try:
            return self.llm_provider.extract_entities(self._content(article)).to_entities()
        except CapabilityError as e:
            console.print(f"[yellow]Entity extraction failed for article {article.id}: {e}[/yellow]")
            return ExtractedEntities()

    def rewrite(self, article: RawArticle, category: ArticleCategory) -> RewriteResult:
        """Rewrite the article; missing parts are filled from the original text."""
        try:
            result = self.llm_provider.rewrite(
                article.title,
                self._content(article),
                article.source_name,
                category.value,
            )
        except CapabilityError as e:
            console.print(f"[yellow]Rewrite failed for article {article.id}: {e}[/yellow]")
            result = RewriteResult()

        return result.model_copy(
            update={
                "optimized_title": result.optimized_title or article.title,
                "short_version": result.short_version or article.content[:self.config.short_fallback_chars],
                "medium_version": result.medium_version or article.content[:self.config.medium_fallback_chars],
                "long_version": result.long_version or article.content[:self.config.max_article_length],
            }
        )

    def has_breaking_keyword(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.breaking_keywords)

    def score_breaking(self, article: RawArticle, category: ArticleCategory) -> BreakingNewsResult:
        """Urgency scoring, only for titles carrying a breaking keyword."""
        if not self.has_breaking_keyword(article.title):
            return BreakingNewsResult(
                is_breaking_news=False,
                urgency_level=UrgencyLevel.NORMAL,
                reasoning="No breaking keyword in title",
                confidence=0.95,
            )

        published = article.published_at or article.ingested_at
        try:
            return self.llm_provider.score_breaking_news(
                article.title,
                self._content(article),
                category.value,
                published.isoformat(),
            )
        except CapabilityError as e:
            console.print(f"[yellow]Breaking-news scoring failed for article {article.id}: {e}[/yellow]")
            return BreakingNewsResult(
                is_breaking_news=False,
                urgency_level=UrgencyLevel.NORMAL,
                reasoning="Scoring unavailable",
                confidence=0.5,
            )
