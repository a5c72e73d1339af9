"""Multi-source synthesis of article clusters."""

from typing import Callable, List, Optional

import pendulum
from rich.console import Console

from ..config import ReliabilityTable, SynthesisConfig
from ..db.clusters import ClusterStorage
from ..db.processed_articles import ProcessedArticleStorage
from ..errors import CapabilityError
from ..llm import LLMProvider, SourceBundle, SynthesisResult
from ..models import (
    ArticleCategory,
    ExtractedEntities,
    ProcessedArticle,
    RawArticle,
    SourceReference,
    SynthesisMetadata,
)

console = Console(stderr=True)

MIN_SYNTHESIS_MEMBERS = 3


class Synthesizer:
    """Merge the members of a cluster into one attributed article."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        processed_articles: ProcessedArticleStorage,
        clusters: ClusterStorage,
        reliability: ReliabilityTable,
        config: Optional[SynthesisConfig] = None,
        now: Optional[Callable[[], pendulum.DateTime]] = None,
    ) -> None:
        self.llm_provider = llm_provider
        self.processed_articles = processed_articles
        self.clusters = clusters
        self.reliability = reliability
        self.config = config or SynthesisConfig(min_members=MIN_SYNTHESIS_MEMBERS)
        self._now = now or (lambda: pendulum.now("UTC"))

    @property
    def min_members(self) -> int:
        return self.config.min_members

    def rank(self, members: List[RawArticle]) -> List[RawArticle]:
        """Most reliable sources first, keeping store order within a tier."""
        return sorted(members, key=lambda a: self.reliability.tier_for(a.source_name).rank)

    def _bundle(self, article: RawArticle) -> SourceBundle:
        published = article.published_at or article.ingested_at
        return SourceBundle(
            source_name=article.source_name,
            reliability=self.reliability.tier_for(article.source_name),
            title=article.title,
            content=article.content[:self.config.content_chars],
            published_at=published.isoformat(),
        )

    def synthesize(self, members: List[RawArticle]) -> Optional[SynthesisResult]:
        """
        Ask for a synthesis of the given cluster members.

        Returns:
            Decoded synthesis, or None when there are too few members or the
            capability failed
        """
        if len(members) < self.min_members:
            console.print(
                f"[dim]Only {len(members)} members, synthesis needs {self.min_members}[/dim]"
            )
            return None

        ranked = self.rank(members)
        console.print(f"[dim]Synthesizing {len(ranked)} articles[/dim]")
        try:
            return self.llm_provider.synthesize([self._bundle(a) for a in ranked])
        except CapabilityError as e:
            console.print(f"[yellow]Synthesis failed: {e}[/yellow]")
            return None

    def publish(
        self,
        cluster_id: int,
        members: List[RawArticle],
        synthesis: SynthesisResult,
        category: ArticleCategory,
    ) -> int:
        """
        Store the synthesized article and link it from its cluster.

        Returns:
            Processed article ID
        """
        ranked = self.rank(members)
        published_at = min(a.published_at or a.ingested_at for a in ranked)
        image_url = next((a.image_url for a in ranked if a.image_url), None)

        article = ProcessedArticle(
            title=synthesis.synthesized_title,
            short_summary=synthesis.synthesized_short,
            medium_summary=synthesis.synthesized_medium,
            long_content=synthesis.synthesized_long,
            categories=[category],
            entities=ExtractedEntities(keywords=synthesis.key_facts[:10]),
            source_article_ids=[a.id for a in ranked],
            sources=[
                SourceReference(
                    name=a.source_name,
                    url=a.url,
                    reliability=self.reliability.tier_for(a.source_name),
                )
                for a in ranked
            ],
            published_at=published_at,
            processed_at=self._now(),
            image_url=image_url,
            is_synthesis=True,
            synthesis_metadata=SynthesisMetadata(
                cluster_id=cluster_id,
                article_count=len(ranked),
                factual_consensus=synthesis.factual_consensus,
                contradictions=synthesis.contradictions,
                confidence=synthesis.confidence,
            ),
            cluster_id=cluster_id,
        )

        article_id = self.processed_articles.insert(article)
        self.clusters.set_synthesized(cluster_id, article_id)
        console.print(f"[green]Published synthesis {article_id} for cluster {cluster_id}[/green]")
        return article_id
