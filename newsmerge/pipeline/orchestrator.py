"""Processing orchestrator that drives one raw article through the pipeline."""

import time
from typing import Callable, List, Optional, Tuple

import pendulum
from rich.console import Console

from ..clustering import ClusterManager, Synthesizer
from ..config import ConfigModel, ReliabilityTable
from ..db.store import ContentStore
from ..dedup import DuplicateDetector, DuplicateVerdict
from ..errors import NotFoundError
from ..llm import LLMProvider
from ..models import ProcessedArticle, RawArticle, Recommendation, SourceReference
from .enrichment import ArticleEnricher
from .models import DuplicateAction, PipelineState, ProcessingResult

console = Console(stderr=True)


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None

    def start(self):
        """Mark stage as started."""
        self.start_time = time.perf_counter()

    def complete(self):
        """Mark stage as completed successfully."""
        self.end_time = time.perf_counter()
        self.success = True

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.perf_counter()
        self.success = False
        self.error = error

    @property
    def duration_ms(self) -> float:
        """Get stage duration in milliseconds."""
        if self.start_time is not None and self.end_time is not None:
            return round((self.end_time - self.start_time) * 1000, 1)
        return 0.0


class RunTrace:
    """Stages and furthest state of a single ``process`` call."""

    def __init__(self, raw_article_id: int) -> None:
        self.raw_article_id = raw_article_id
        self.started = time.perf_counter()
        self.stages: List[PipelineStage] = []
        self.state: Optional[PipelineState] = None

    def run(self, name: str, fn: Callable, *args, reached: Optional[PipelineState] = None):
        """Run one timed stage, recording failures before re-raising."""
        stage = PipelineStage(name)
        self.stages.append(stage)
        stage.start()
        try:
            value = fn(*args)
        except Exception as e:
            stage.fail(str(e))
            raise
        stage.complete()
        if reached is not None:
            self.state = reached
        return value

    def result(self, **fields) -> ProcessingResult:
        return ProcessingResult(
            raw_article_id=self.raw_article_id,
            processing_time_ms=int((time.perf_counter() - self.started) * 1000),
            stages={s.name: s.duration_ms for s in self.stages},
            reached_state=self.state,
            **fields,
        )


class ArticleProcessor:
    """Orchestrates duplicate detection, clustering, synthesis and enrichment.

    Each call to ``process`` is independent: it reads everything fresh from
    the store and keeps its bookkeeping in its own ``RunTrace``. The raw
    article is marked processed last, after every write it depends on, so a
    crashed run can simply be replayed.
    """

    def __init__(
        self,
        store: ContentStore,
        llm_provider: LLMProvider,
        reliability: ReliabilityTable,
        breaking_keywords: Tuple[str, ...],
        config: Optional[ConfigModel] = None,
        now: Optional[Callable[[], pendulum.DateTime]] = None,
    ) -> None:
        """Initialize the processor and its components."""
        config = config or ConfigModel()
        self.store = store
        self.llm_provider = llm_provider
        self.reliability = reliability
        self._now = now or (lambda: pendulum.now("UTC"))

        self.detector = DuplicateDetector(store.raw_articles, llm_provider, config.dedup, now=self._now)
        self.cluster_manager = ClusterManager(store.clusters, store.raw_articles)
        self.synthesizer = Synthesizer(
            llm_provider,
            store.processed_articles,
            store.clusters,
            reliability,
            config.synthesis,
            now=self._now,
        )
        self.enricher = ArticleEnricher(llm_provider, breaking_keywords, config.enrichment)

    def _load(self, raw_article_id: int) -> RawArticle:
        article = self.store.raw_articles.get(raw_article_id)
        if article is None:
            raise NotFoundError(f"Raw article not found: {raw_article_id}")
        return article

    def _mark_processed(self, article: RawArticle, skipped: bool = False) -> None:
        if not self.store.raw_articles.mark_processed(article.id, skipped=skipped):
            console.print(f"[dim]Article {article.id} was already marked processed by another run[/dim]")

    def process(self, raw_article_id: int) -> ProcessingResult:
        """
        Process one raw article.

        Never raises: a missing article, storage errors and unexpected errors
        become a failed result and leave the article unprocessed for a later
        retry.
        """
        trace = RunTrace(raw_article_id)
        console.print(f"[dim]Processing raw article {raw_article_id}[/dim]")

        try:
            article = trace.run("fetch", self._load, raw_article_id, reached=PipelineState.FETCHED)

            if article.processed:
                console.print(f"[dim]Raw article {raw_article_id} already processed[/dim]")
                return trace.result(success=True, state=PipelineState.ALREADY_PROCESSED)

            verdict = trace.run("dedup", self.detector.detect, article)
            if verdict.recommendation == Recommendation.SEPARATE:
                trace.state = PipelineState.NOVEL

            if verdict.recommendation == Recommendation.SKIP:
                trace.run("mark_processed", self._mark_processed, article, True, reached=PipelineState.DUPLICATE_SKIP)
                return trace.result(
                    success=True,
                    state=PipelineState.DUPLICATE_SKIP,
                    is_duplicate=True,
                    duplicate_action=DuplicateAction.SKIPPED,
                )

            if verdict.recommendation in (Recommendation.MERGE, Recommendation.UPDATE):
                return self._process_duplicate(trace, article, verdict)

            return self._process_novel(trace, article)

        except NotFoundError as e:
            console.print(f"[red]{e}[/red]")
            return trace.result(success=False, state=PipelineState.NOT_FOUND, error=str(e))
        except Exception as e:
            console.print(f"[red]Processing failed for raw article {raw_article_id}: {e}[/red]")
            return trace.result(success=False, state=PipelineState.FAILED, error=str(e))

    def _process_duplicate(
        self,
        trace: RunTrace,
        article: RawArticle,
        verdict: DuplicateVerdict,
    ) -> ProcessingResult:
        """Attach to the matching cluster and synthesize it once it is large enough."""
        categorization = trace.run("categorize", self.enricher.categorize, article)
        category = categorization.main_category

        cluster_id = trace.run(
            "cluster",
            self.cluster_manager.attach_or_create,
            article.id,
            verdict.matching_article_ids,
            category,
            reached=PipelineState.DUPLICATE_MERGE,
        )
        cluster = self.cluster_manager.get(cluster_id)

        state = PipelineState.DUPLICATE_MERGE
        synthesized_id = None
        if cluster is not None and cluster.size < self.synthesizer.min_members:
            state = PipelineState.THRESHOLD_NOT_MET
        elif cluster is not None and not cluster.is_synthesized:
            members = self.cluster_manager.members_of(cluster_id)
            synthesis = trace.run("synthesize", self.synthesizer.synthesize, members)
            if synthesis is not None:
                synthesized_id = trace.run(
                    "publish",
                    self.synthesizer.publish,
                    cluster_id,
                    members,
                    synthesis,
                    category,
                    reached=PipelineState.SYNTHESIZED,
                )
                state = PipelineState.SYNTHESIZED

        trace.run("mark_processed", self._mark_processed, article)

        action = DuplicateAction.UPDATED if verdict.recommendation == Recommendation.UPDATE else DuplicateAction.MERGED
        return trace.result(
            success=True,
            state=state,
            article_id=synthesized_id,
            is_duplicate=True,
            duplicate_action=action,
            cluster_id=cluster_id,
            categories=[category],
        )

    def _process_novel(self, trace: RunTrace, article: RawArticle) -> ProcessingResult:
        """Enrich a new story and publish it on its own."""
        categorization = trace.run(
            "categorize", self.enricher.categorize, article, reached=PipelineState.CATEGORIZED
        )
        category = categorization.main_category
        entities = trace.run(
            "extract_entities", self.enricher.extract_entities, article, reached=PipelineState.ENTITIES_EXTRACTED
        )
        rewritten = trace.run(
            "rewrite", self.enricher.rewrite, article, category, reached=PipelineState.REWRITTEN
        )
        breaking = trace.run(
            "score_breaking", self.enricher.score_breaking, article, category, reached=PipelineState.BREAKING_SCORED
        )

        processed = ProcessedArticle(
            title=rewritten.optimized_title,
            short_summary=rewritten.short_version,
            medium_summary=rewritten.medium_version,
            long_content=rewritten.long_version,
            categories=categorization.categories,
            category_confidence=categorization.confidence,
            entities=entities,
            source_article_ids=[article.id],
            sources=[
                SourceReference(
                    name=article.source_name,
                    url=article.url,
                    reliability=self.reliability.tier_for(article.source_name),
                )
            ],
            tags=rewritten.suggested_tags,
            published_at=article.published_at or article.ingested_at,
            processed_at=self._now(),
            image_url=article.image_url,
            trending=breaking.is_breaking_news,
            is_breaking_news=breaking.is_breaking_news,
            breaking_news_level=breaking.urgency_level,
            raw_article_id=article.id,
        )
        article_id = trace.run(
            "publish", self.store.processed_articles.insert, processed, reached=PipelineState.PUBLISHED
        )
        trace.run("mark_processed", self._mark_processed, article)

        console.print(f"[green]Published article {article_id} from raw article {article.id}[/green]")
        return trace.result(
            success=True,
            state=PipelineState.PUBLISHED,
            article_id=article_id,
            categories=categorization.categories,
            is_breaking_news=breaking.is_breaking_news,
        )

