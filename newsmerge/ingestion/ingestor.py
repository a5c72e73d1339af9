"""Turn fetched source items into stored raw articles."""

from typing import Callable, Dict, List, Optional

import pendulum
from rich.console import Console

from ..config import SourceConfig
from ..db.raw_articles import RawArticleStorage
from ..dedup import content_hash
from ..errors import IngestionError
from ..models import RawArticle
from .article_fetcher import ArticleFetcher
from .models import IngestReport, RawItem
from .rss_fetcher import ItemFetcher

console = Console(stderr=True)


class RawArticleIngestor:
    """Store new items from configured sources as unprocessed raw articles."""

    def __init__(
        self,
        raw_articles: RawArticleStorage,
        fetcher: ItemFetcher,
        article_fetcher: Optional[ArticleFetcher] = None,
        hash_prefix_chars: int = 200,
        min_content_chars: int = 400,
        now: Optional[Callable[[], pendulum.DateTime]] = None,
    ) -> None:
        """
        Initialize the ingestor.

        Args:
            raw_articles: Raw article storage
            fetcher: Reads items from a source
            article_fetcher: Completes short feed summaries from the article page
            hash_prefix_chars: Content characters folded into the content hash
            min_content_chars: Summaries shorter than this are completed from the page
            now: Clock, for tests
        """
        self.raw_articles = raw_articles
        self.fetcher = fetcher
        self.article_fetcher = article_fetcher
        self.hash_prefix_chars = hash_prefix_chars
        self.min_content_chars = min_content_chars
        self._now = now or (lambda: pendulum.now("UTC"))

    def _complete(self, items: List[RawItem]) -> int:
        """Replace short summaries with extracted page text where possible."""
        short = [item for item in items if len(item.summary) < self.min_content_chars]
        if not short or self.article_fetcher is None:
            return 0

        completed = 0
        for item, page in zip(short, self.article_fetcher.fetch_articles_sync(short)):
            if page.fetch_success and len(page.text) > len(item.summary):
                item.summary = page.text
                item.image_url = item.image_url or page.image_url
                completed += 1
            elif not page.fetch_success:
                console.print(f"[dim]Keeping feed summary for {item.url}: {page.error}[/dim]")
        return completed

    def to_raw_article(self, item: RawItem) -> RawArticle:
        """Build the raw article for an item, content falling back to the title."""
        content = item.summary or item.title
        return RawArticle(
            source_id=item.source_id,
            source_name=item.source_name,
            title=item.title,
            content=content,
            url=item.url,
            published_at=item.published_at,
            ingested_at=self._now(),
            image_url=item.image_url,
            author=item.author,
            content_hash=content_hash(item.title, content, self.hash_prefix_chars),
        )

    def ingest_source(self, source: SourceConfig, source_id: Optional[int] = None) -> IngestReport:
        """Fetch one source and insert the items not stored yet."""
        report = IngestReport(source_name=source.name)
        try:
            items = self.fetcher.fetch_raw_items(source)
        except IngestionError as e:
            console.print(f"[red]{e}[/red]")
            report.error = str(e)
            return report

        report.fetched = len(items)
        report.completed_from_page = self._complete(items)

        for item in items:
            item.source_id = source_id
            article_id = self.raw_articles.insert(self.to_raw_article(item))
            if article_id is None:
                report.already_stored += 1
            else:
                report.inserted += 1
                report.inserted_ids.append(article_id)

        console.print(
            f"[green]{source.name}: {report.inserted} new, {report.already_stored} already stored[/green]"
        )
        return report

    def ingest_all(
        self,
        sources: List[SourceConfig],
        source_map: Optional[Dict[str, int]] = None,
    ) -> List[IngestReport]:
        """Ingest every enabled feed source in priority order."""
        source_map = source_map or {}
        reports = []
        for source in sorted(sources, key=lambda s: s.priority):
            if not source.enabled:
                continue
            if source.kind != "rss" and not source.feed_url:
                console.print(f"[yellow]Skipping {source.name}: no feed configured[/yellow]")
                continue
            reports.append(self.ingest_source(source, source_map.get(source.name)))
        return reports
