"""Backstop sweep over raw articles that were never processed."""

import time
from typing import Callable, Optional

from rich.console import Console

from ..db.raw_articles import RawArticleStorage
from .models import DuplicateAction, PipelineState, SweepReport
from .orchestrator import ArticleProcessor

console = Console(stderr=True)


class UnprocessedSweep:
    """Retry processing for articles left unprocessed by crashes or failures."""

    def __init__(
        self,
        raw_articles: RawArticleStorage,
        processor: ArticleProcessor,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.raw_articles = raw_articles
        self.processor = processor
        self._sleep = sleep or time.sleep

    def run(self, batch_size: int = 20, pace_seconds: float = 1.0) -> SweepReport:
        """
        Process up to ``batch_size`` unprocessed articles, oldest first.

        Items run one after another with ``pace_seconds`` between them to
        stay under the capability's rate limits.
        """
        report = SweepReport()
        pending = self.raw_articles.list_unprocessed(limit=batch_size)
        console.print(f"[blue]Sweeping {len(pending)} unprocessed articles[/blue]")

        for index, article in enumerate(pending):
            if index and pace_seconds > 0:
                self._sleep(pace_seconds)

            result = self.processor.process(article.id)
            report.attempted += 1
            report.results.append(result)

            if not result.success:
                report.failed += 1
                continue

            report.succeeded += 1
            if result.duplicate_action == DuplicateAction.SKIPPED:
                report.skipped += 1
            elif result.duplicate_action in (DuplicateAction.MERGED, DuplicateAction.UPDATED):
                report.merged += 1
            if result.article_id is not None and result.state in (PipelineState.PUBLISHED, PipelineState.SYNTHESIZED):
                report.published_ids.append(result.article_id)

        console.print(
            f"[green]Sweep done: {report.succeeded}/{report.attempted} succeeded, "
            f"{report.failed} failed[/green]"
        )
        return report
