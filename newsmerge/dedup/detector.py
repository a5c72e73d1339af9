"""Duplicate detection: content hash, title similarity, then model judgment."""

from typing import Callable, List, Optional

import pendulum
from rich.console import Console

from ..config import DedupConfig
from ..db.raw_articles import RawArticleStorage
from ..errors import CapabilityError
from ..llm import ArticleBrief, LLMProvider
from ..models import RawArticle, Recommendation
from .hashing import content_hash, jaccard, title_tokens
from .models import DuplicateVerdict, TitleCandidate

console = Console(stderr=True)


class DuplicateDetector:
    """Decide whether a new raw article repeats earlier coverage.

    The checks run cheapest first and stop at the first conclusive one:

    1. content hash within the lookback window, conclusive SKIP
    2. title similarity, no candidate means SEPARATE without a model call
    3. duplicate judgment by the language model over the candidates
    4. if the model fails, a title-overlap fallback
    """

    def __init__(
        self,
        raw_articles: RawArticleStorage,
        llm_provider: LLMProvider,
        config: Optional[DedupConfig] = None,
        now: Optional[Callable[[], pendulum.DateTime]] = None,
    ) -> None:
        self.raw_articles = raw_articles
        self.llm_provider = llm_provider
        self.config = config or DedupConfig()
        self._now = now or (lambda: pendulum.now("UTC"))

    def _cutoff(self) -> pendulum.DateTime:
        return self._now().subtract(hours=self.config.lookback_hours)

    def quick_hash_check(self, article: RawArticle) -> List[int]:
        """IDs of earlier recent articles with the same content fingerprint."""
        digest = content_hash(article.title, article.content, self.config.hash_prefix_chars)
        return self.raw_articles.find_by_hash(
            digest,
            since=self._cutoff(),
            earlier_than=article,
            limit=self.config.max_candidates,
        )

    def title_candidates(self, article: RawArticle) -> List[TitleCandidate]:
        """Earlier recent articles whose titles overlap enough, best first."""
        recent = self.raw_articles.recent(
            since=self._cutoff(),
            earlier_than=article,
            limit=self.config.candidate_pool,
        )

        tokens = title_tokens(article.title)
        candidates = []
        for other in recent:
            score = jaccard(tokens, title_tokens(other.title))
            if score > self.config.candidate_threshold:
                candidates.append(TitleCandidate(article=other, score=score))

        candidates.sort(key=lambda c: c.score, reverse=True)
        return candidates[:self.config.max_candidates]

    def detect(self, article: RawArticle) -> DuplicateVerdict:
        """
        Run the detection pipeline for one article.

        Model failures never propagate; storage failures do.
        """
        matching_ids = self.quick_hash_check(article)
        if matching_ids:
            console.print(f"[dim]Article {article.id}: exact duplicate of {matching_ids}[/dim]")
            return DuplicateVerdict.exact(matching_ids)

        candidates = self.title_candidates(article)
        if not candidates:
            console.print(f"[dim]Article {article.id}: no similar titles[/dim]")
            return DuplicateVerdict.novel()

        console.print(f"[dim]Article {article.id}: {len(candidates)} similar titles, asking for judgment[/dim]")
        try:
            verdict = self._semantic_check(article, candidates)
        except CapabilityError as e:
            console.print(f"[yellow]Duplicate judgment failed for article {article.id}: {e}[/yellow]")
            verdict = self._fallback(candidates)

        console.print(
            f"[dim]Article {article.id}: {verdict.recommendation.value} "
            f"(similarity {verdict.similarity_score:.2f}, confidence {verdict.confidence:.2f})[/dim]"
        )
        return verdict

    def _semantic_check(self, article: RawArticle, candidates: List[TitleCandidate]) -> DuplicateVerdict:
        reference_time = article.published_at or article.ingested_at
        brief = ArticleBrief(
            id=article.id,
            title=article.title,
            summary=article.content[:300],
            source=article.source_name,
            date=reference_time.isoformat(),
        )
        briefs = [
            ArticleBrief(
                id=c.article.id,
                title=c.article.title,
                summary=c.article.content[:200],
                source=c.article.source_name,
                date=(c.article.published_at or c.article.ingested_at).isoformat(),
            )
            for c in candidates
        ]

        judgment = self.llm_provider.judge_duplicates(brief, briefs, self.config.lookback_hours)

        # Only ids we actually offered can be matched
        candidate_ids = [c.article.id for c in candidates]
        matching = [i for i in dict.fromkeys(judgment.matching_article_ids) if i in candidate_ids]
        recommendation = judgment.recommendation
        if recommendation != Recommendation.SEPARATE and not matching:
            matching = [candidate_ids[0]]

        return DuplicateVerdict(
            is_duplicate=judgment.is_duplicate or recommendation != Recommendation.SEPARATE,
            similarity_score=judgment.similarity_score,
            matching_article_ids=matching,
            matching_summary=judgment.matching_summary,
            recommendation=recommendation,
            confidence=judgment.confidence,
        )

    def _fallback(self, candidates: List[TitleCandidate]) -> DuplicateVerdict:
        best = max(candidates, key=lambda c: c.score)
        if best.score > self.config.fallback_merge_threshold:
            return DuplicateVerdict(
                is_duplicate=True,
                similarity_score=best.score,
                matching_article_ids=[best.article.id],
                matching_summary="Title overlap (duplicate judgment unavailable)",
                recommendation=Recommendation.MERGE,
                confidence=0.6,
            )
        return DuplicateVerdict(
            is_duplicate=False,
            similarity_score=best.score,
            recommendation=Recommendation.SEPARATE,
            confidence=0.6,
        )
